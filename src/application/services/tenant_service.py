"""Tenant service - business registration and credential resolution."""

import structlog
from sqlalchemy.exc import SQLAlchemyError

from src.application.dto import RegistrationRequest, RegistrationResponse
from src.domain.entities import GatewayCredentials, Tenant
from src.domain.exceptions import TenantNotFoundException, TenantRegistrationException
from src.domain.interfaces import TenantRepository

logger = structlog.get_logger(__name__)


class TenantService:
    """
    Application service for tenant use cases.

    Credentials are resolved from the store on every call so that a
    re-registration takes effect on the very next push.
    """

    def __init__(self, tenant_repository: TenantRepository):
        self._tenant_repo = tenant_repository

    async def register(self, request: RegistrationRequest) -> RegistrationResponse:
        """
        Register a business, overwriting any existing credentials.

        Args:
            request: Business name, shortcode and Daraja credentials

        Returns:
            RegistrationResponse for the stored tenant

        Raises:
            TenantRegistrationException: If the request is incomplete or
                the store rejects the write
        """
        errors = request.validate()
        if errors:
            raise TenantRegistrationException(request.shortcode, "; ".join(errors))

        log = logger.bind(shortcode=request.shortcode)
        log.info("registration_requested", business_name=request.business_name)

        tenant = Tenant(
            shortcode=request.shortcode.strip(),
            business_name=request.business_name.strip(),
            consumer_key=request.consumer_key.strip(),
            consumer_secret=request.consumer_secret.strip(),
            passkey=request.passkey.strip(),
        )

        try:
            await self._tenant_repo.upsert(tenant)
        except SQLAlchemyError as e:
            log.error("registration_failed", error_type=type(e).__name__)
            raise TenantRegistrationException(
                request.shortcode, "Unable to store registration"
            ) from e

        log.info("registration_succeeded", business_name=tenant.business_name)

        return RegistrationResponse(
            shortcode=tenant.shortcode,
            business_name=tenant.business_name,
        )

    async def resolve_credentials(self, shortcode: str) -> GatewayCredentials:
        """
        Look up the Daraja credentials registered for a shortcode.

        Raises:
            TenantNotFoundException: If no business uses this shortcode
        """
        tenant = await self._tenant_repo.get_by_shortcode(shortcode)

        if tenant is None:
            logger.warning("tenant_not_found", shortcode=shortcode)
            raise TenantNotFoundException(shortcode)

        return tenant.credentials
