import re
from typing import List, Optional
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.config import settings
from app.core.db_client import db
from app.core.exceptions import (
    AccountAlreadyExistsError,
    AccountNotEnabledError,
    AccountNotFoundError,
    AuthenticationError,
    CreationError,
    GCMAccountAlreadyExistsError,
    GCMAccountNotFoundError,
)
from app.core.logging import get_service_logger
from app.core.security import hash_password, needs_rehash, verify_password
from app.models.account import Account, UserGroupMapping
from app.models.db_models import AccountModel, GCMAccountModel, UserGroupMappingModel

logger = get_service_logger("account")

LOGIN_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")

# Column sizes of the accounts table
FIELD_MAX_LENGTHS = {
    "login": 100,
    "name": 255,
    "email": 255,
    "language": 10,
    "timeZone": 64,
}


class AccountService:
    """Service managing platform accounts, credentials and GCM tokens."""

    def __init__(self):
        self.logger = logger

    def _model_to_pydantic(self, model: AccountModel) -> Account:
        """Convert SQLAlchemy model to Pydantic model."""
        return Account(
            login=model.login,
            name=model.name or "",
            email=model.email or "",
            language=model.language or settings.DEFAULT_LANGUAGE,
            time_zone=model.time_zone or settings.DEFAULT_TIMEZONE,
            password_hash=model.password_hash,
            enabled=model.enabled,
            groups=[mapping.group_name for mapping in model.groups],
            creation_date=model.creation_date,
        )

    def _check_fields(self, locale: Optional[str], **values: Optional[str]) -> None:
        for field_name, value in values.items():
            if value and len(value) > FIELD_MAX_LENGTHS[field_name]:
                raise CreationError(
                    locale=locale,
                    details={"field": field_name, "max_length": FIELD_MAX_LENGTHS[field_name]},
                )

        email = values.get("email")
        if email and not EMAIL_PATTERN.match(email):
            raise CreationError(
                locale=locale, details={"field": "email", "value": email}
            )

    def _validate_new_account(
        self,
        login: Optional[str],
        name: Optional[str],
        email: str,
        password: Optional[str],
        language: Optional[str],
        time_zone: Optional[str],
    ) -> None:
        if not login or not LOGIN_PATTERN.match(login):
            raise CreationError(
                locale=language, details={"field": "login", "value": login}
            )
        if not password:
            raise CreationError(locale=language, details={"field": "newPassword"})
        self._check_fields(
            language,
            login=login,
            name=name,
            email=email,
            language=language,
            timeZone=time_zone,
        )

    async def create_account(
        self,
        login: Optional[str],
        name: Optional[str],
        email: Optional[str],
        language: Optional[str],
        password: Optional[str],
        time_zone: Optional[str],
        group_name: str = UserGroupMapping.REGULAR_USER_ROLE_ID,
        enabled: Optional[bool] = None,
    ) -> Account:
        """
        Create an account and its security group mapping.

        The account is enabled according to the registration strategy unless
        ``enabled`` is given explicitly.

        Raises:
            AccountAlreadyExistsError: If the login is taken
            CreationError: If the input is invalid or the account cannot be stored
        """
        email = (email or "").strip()
        self._validate_new_account(login, name, email, password, language, time_zone)

        if enabled is None:
            enabled = settings.accounts_enabled_on_creation

        try:
            async with db.session() as session:
                if await session.get(AccountModel, login) is not None:
                    raise AccountAlreadyExistsError(login, locale=language)

                account_model = AccountModel(
                    login=login,
                    name=name or "",
                    email=email,
                    language=language or settings.DEFAULT_LANGUAGE,
                    time_zone=time_zone or settings.DEFAULT_TIMEZONE,
                    password_hash=hash_password(password),
                    enabled=enabled,
                    creation_date=datetime.now(timezone.utc),
                )
                account_model.groups.append(
                    UserGroupMappingModel(login=login, group_name=group_name)
                )
                session.add(account_model)
                await session.flush()

                account = self._model_to_pydantic(account_model)

        except AccountAlreadyExistsError:
            raise
        except IntegrityError as e:
            self.logger.warning("Account creation conflict", login=login, error=str(e))
            raise AccountAlreadyExistsError(login, locale=language)
        except SQLAlchemyError as e:
            self.logger.error("Error creating account", login=login, error=str(e))
            raise CreationError(locale=language)

        self.logger.info("Account created", login=login, enabled=account.enabled)
        if not account.enabled:
            self.logger.info("Account awaiting administrator validation", login=login)
        return account

    async def get_account(self, login: str) -> Account:
        """
        Raises:
            AccountNotFoundError: If no account has this login
        """
        async with db.session() as session:
            account_model = await session.get(AccountModel, login)
            if account_model is None:
                raise AccountNotFoundError(login)
            return self._model_to_pydantic(account_model)

    async def get_my_account(self, caller_login: str) -> Account:
        return await self.get_account(caller_login)

    async def update_account(
        self,
        login: str,
        name: Optional[str],
        email: Optional[str],
        language: Optional[str],
        password: Optional[str],
        time_zone: Optional[str],
    ) -> Account:
        """
        Update the caller's account. The password only changes when a new
        non-empty one is given.

        Raises:
            AccountNotFoundError: If the account does not exist
            CreationError: If the new email is malformed or a field is too long
        """
        async with db.session() as session:
            account_model = await session.get(AccountModel, login)
            if account_model is None:
                raise AccountNotFoundError(login, locale=language)

            if email is not None:
                email = email.strip()
            self._check_fields(
                language, name=name, email=email, language=language, timeZone=time_zone
            )

            if name is not None:
                account_model.name = name
            if email is not None:
                account_model.email = email
            if language:
                account_model.language = language
            if time_zone:
                account_model.time_zone = time_zone
            if password:
                account_model.password_hash = hash_password(password)

            await session.flush()
            account = self._model_to_pydantic(account_model)

        self.logger.info(
            "Account updated", login=login, password_changed=bool(password)
        )
        return account

    async def get_accounts(self) -> List[Account]:
        async with db.session() as session:
            result = await session.execute(
                select(AccountModel).order_by(AccountModel.login)
            )
            return [self._model_to_pydantic(m) for m in result.scalars().all()]

    async def enable_account(self, login: str, enabled: bool) -> Account:
        """
        Raises:
            AccountNotFoundError: If the account does not exist
        """
        async with db.session() as session:
            account_model = await session.get(AccountModel, login)
            if account_model is None:
                raise AccountNotFoundError(login)
            account_model.enabled = enabled
            await session.flush()
            account = self._model_to_pydantic(account_model)

        self.logger.info("Account enabled state changed", login=login, enabled=enabled)
        return account

    async def check_credentials(self, login: str, password: str) -> Account:
        """
        Authenticate a login/password pair.

        Raises:
            AuthenticationError: If the login is unknown or the password wrong
            AccountNotEnabledError: If the account is disabled
        """
        async with db.session() as session:
            account_model = await session.get(AccountModel, login)
            if account_model is None or not verify_password(
                password, account_model.password_hash
            ):
                raise AuthenticationError()

            if not account_model.enabled:
                raise AccountNotEnabledError(login, locale=account_model.language)

            if needs_rehash(account_model.password_hash):
                account_model.password_hash = hash_password(password)

            return self._model_to_pydantic(account_model)

    async def set_gcm_account(self, login: str, gcm_id: str) -> None:
        """
        Register or replace the caller's push-notification token.

        Raises:
            AccountNotFoundError: If the caller has no account
            GCMAccountAlreadyExistsError: If the token belongs to another account
            CreationError: If the token cannot be stored
        """
        try:
            async with db.session() as session:
                account_model = await session.get(AccountModel, login)
                if account_model is None:
                    raise AccountNotFoundError(login)
                locale = account_model.language

                owner = await session.execute(
                    select(GCMAccountModel).where(GCMAccountModel.gcm_id == gcm_id)
                )
                owner_model = owner.scalar_one_or_none()
                if owner_model is not None and owner_model.account_login != login:
                    raise GCMAccountAlreadyExistsError(locale=locale)

                gcm_model = await session.get(GCMAccountModel, login)
                if gcm_model is None:
                    session.add(GCMAccountModel(account_login=login, gcm_id=gcm_id))
                else:
                    gcm_model.gcm_id = gcm_id
                await session.flush()

        except (AccountNotFoundError, GCMAccountAlreadyExistsError):
            raise
        except IntegrityError as e:
            self.logger.warning("GCM account conflict", login=login, error=str(e))
            raise GCMAccountAlreadyExistsError()
        except SQLAlchemyError as e:
            self.logger.error("Error storing GCM account", login=login, error=str(e))
            raise CreationError()

        self.logger.info("GCM account set", login=login)

    async def delete_gcm_account(self, login: str) -> None:
        """
        Raises:
            AccountNotFoundError: If the caller has no account
            GCMAccountNotFoundError: If no token is registered
        """
        async with db.session() as session:
            account_model = await session.get(AccountModel, login)
            if account_model is None:
                raise AccountNotFoundError(login)

            gcm_model = await session.get(GCMAccountModel, login)
            if gcm_model is None:
                raise GCMAccountNotFoundError(login, locale=account_model.language)

            await session.delete(gcm_model)

        self.logger.info("GCM account deleted", login=login)

    async def ensure_admin_account(
        self, login: str, password: str, email: str
    ) -> bool:
        """Create the platform administrator if missing. Returns True when created."""
        try:
            await self.create_account(
                login,
                "Administrator",
                email,
                settings.DEFAULT_LANGUAGE,
                password,
                settings.DEFAULT_TIMEZONE,
                group_name=UserGroupMapping.ADMIN_ROLE_ID,
                enabled=True,
            )
            return True
        except AccountAlreadyExistsError:
            return False


# Global service instance
account_service = AccountService()
