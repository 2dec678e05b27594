"""
Authentication service: login, manager login, registration and token issuance.
"""

from datetime import timedelta
from http import HTTPStatus

from authcore.config import Settings
from authcore.kernel.identity.exceptions import EmailAlreadyExistsError
from authcore.kernel.identity.jwt import JWTManager, TokenPair, UserId
from authcore.kernel.identity.password import (
    BCRYPT_ROUNDS,
    hash_password_async,
    verify_password_async,
)
from authcore.kernel.identity.user_repository import UserRepository
from authcore.kernel.models.user import User, UserRole
from authcore.logging_config import get_logger
from authcore.schemas.auth import (
    EmailExistsResponse,
    RefreshTokenResponse,
    RegisterRequest,
    UserResponse,
)
from authcore.schemas.common import ServiceResponse

logger = get_logger(__name__)

# Shared by unknown email, wrong password and wrong role
INVALID_CREDENTIALS = "Email or Password is not correct"
EMAIL_IN_USE = "Email is already in use"
PASSWORDS_DO_NOT_MATCH = "Passwords do not match"

STANDALONE_REFRESH_TOKEN_EXPIRE_DAYS = 7


class AuthService:
    """
    Service for credential verification and token issuance.

    Every public method returns a ServiceResponse and never raises: expected
    failures come back as 422, anything else is logged and returned as 500.
    """

    def __init__(
        self,
        users: UserRepository,
        jwt_manager: JWTManager,
        web_jwt_manager: JWTManager,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
        standalone_refresh_expire_days: int = STANDALONE_REFRESH_TOKEN_EXPIRE_DAYS,
    ):
        self.users = users
        self.jwt_manager = jwt_manager
        self.web_jwt_manager = web_jwt_manager
        self.bcrypt_rounds = bcrypt_rounds
        self.standalone_refresh_expire = timedelta(days=standalone_refresh_expire_days)

    @classmethod
    def from_settings(cls, users: UserRepository, settings: Settings) -> "AuthService":
        """Build a service whose two signing secrets come from configuration."""
        return cls(
            users=users,
            jwt_manager=JWTManager.from_settings(settings, settings.jwt_secret),
            web_jwt_manager=JWTManager.from_settings(settings, settings.token_secret),
            bcrypt_rounds=settings.bcrypt_rounds,
            standalone_refresh_expire_days=settings.standalone_refresh_token_expire_days,
        )

    @staticmethod
    def _internal_error(context: str, exc: Exception) -> ServiceResponse:
        message = f"{context}: {exc}"
        logger.exception(message)
        return ServiceResponse.failed(message, HTTPStatus.INTERNAL_SERVER_ERROR)

    @staticmethod
    def _invalid_credentials(reason: str) -> ServiceResponse[TokenPair]:
        # The reason stays in debug logs; callers always see the same message
        logger.debug("Login rejected", extra={"reason": reason})
        return ServiceResponse[TokenPair].failed(
            INVALID_CREDENTIALS, HTTPStatus.UNPROCESSABLE_ENTITY
        )

    async def login(self, email: str, password: str) -> ServiceResponse[TokenPair]:
        """
        Authenticate a user and issue an access/refresh token pair.

        Args:
            email: Exact email of the account
            password: Plain text password

        Returns:
            Success/200 with a TokenPair, or Failed/422 on bad credentials
        """
        try:
            user = await self.users.find_by_email(email)
            if user is None:
                return self._invalid_credentials("unknown_email")

            if not await verify_password_async(password, user.password_hash):
                return self._invalid_credentials("wrong_password")

            token_pair = self.jwt_manager.create_token_pair(user.id)
            return ServiceResponse[TokenPair].ok("Login successfully", token_pair)
        except Exception as e:
            return self._internal_error("Error during login", e)

    async def login_web(self, email: str, password: str) -> ServiceResponse[TokenPair]:
        """
        Authenticate a manager for the web console.

        Same contract as login, but only client-manager accounts pass and
        tokens are signed with the web secret. A wrong role is reported
        exactly like wrong credentials.
        """
        try:
            user = await self.users.find_by_email(email)
            if user is None:
                return self._invalid_credentials("unknown_email")

            if not user.is_manager:
                return self._invalid_credentials("role_not_manager")

            if not await verify_password_async(password, user.password_hash):
                return self._invalid_credentials("wrong_password")

            token_pair = self.web_jwt_manager.create_token_pair(user.id)
            return ServiceResponse[TokenPair].ok("Login successfully", token_pair)
        except Exception as e:
            return self._internal_error("Error during login", e)

    async def register(self, request: RegisterRequest) -> ServiceResponse[UserResponse]:
        """
        Register a new client-user account.

        The duplicate-email check runs before the password confirmation
        check. The created record is fully persisted before returning.
        """
        try:
            if await self.users.find_by_email(request.email) is not None:
                return ServiceResponse[UserResponse].failed(
                    EMAIL_IN_USE, HTTPStatus.UNPROCESSABLE_ENTITY
                )

            if request.password != request.confirm_password:
                return ServiceResponse[UserResponse].failed(
                    PASSWORDS_DO_NOT_MATCH, HTTPStatus.UNPROCESSABLE_ENTITY
                )

            password_hash = await hash_password_async(request.password, self.bcrypt_rounds)
            try:
                user: User = await self.users.create({
                    "name": request.name,
                    "email": request.email,
                    "password_hash": password_hash,
                    "role": UserRole.CLIENT_USER.value,
                    "phone_number": "",
                    "birth_date": "",
                    "gender": "",
                    "avatar": "",
                    "age": "",
                    "doctor_id": "",
                })
            except EmailAlreadyExistsError:
                # Lost a race with a concurrent registration
                return ServiceResponse[UserResponse].failed(
                    EMAIL_IN_USE, HTTPStatus.UNPROCESSABLE_ENTITY
                )

            return ServiceResponse[UserResponse].ok(
                "User registered successfully",
                UserResponse.model_validate(user),
            )
        except Exception as e:
            return self._internal_error("Error during registration", e)

    async def check_email_exists(self, email: str) -> ServiceResponse[EmailExistsResponse]:
        """Report whether an account uses this email."""
        try:
            user = await self.users.find_by_email(email)
            if user is not None:
                return ServiceResponse[EmailExistsResponse].ok(
                    "Email exists", EmailExistsResponse(exists=True)
                )
            return ServiceResponse[EmailExistsResponse].ok(
                "Email does not exist", EmailExistsResponse(exists=False)
            )
        except Exception as e:
            return self._internal_error("Error checking email existence", e)

    async def generate_refresh_token(self, user_id: UserId) -> ServiceResponse[RefreshTokenResponse]:
        """
        Sign a standalone refresh token for user_id.

        Pure signing: the id is not looked up in the store.
        """
        try:
            refresh_token = self.jwt_manager.create_refresh_token(
                user_id,
                claim="userId",
                expires_delta=self.standalone_refresh_expire,
            )
            return ServiceResponse[RefreshTokenResponse].ok(
                "Refresh token generated successfully",
                RefreshTokenResponse(refresh_token=refresh_token),
            )
        except Exception as e:
            return self._internal_error("Error generating refresh token", e)
