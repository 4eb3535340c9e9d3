"""
Pesa Bridge - Multi-tenant M-Pesa Payment Event Bridge

A FastAPI-based service that initiates STK pushes on behalf of registered
businesses, records successful payment callbacks, and relays them to the
business's live sessions over WebSockets.
"""

__version__ = "0.1.0"
