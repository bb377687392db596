"""
Authentication Flow

Signs an employee or an administrator in.

Pipeline:
1. Login stage → LoginResult
2. Create-account stage, only when login failed → AuthOutcome
3. Completion → session write + navigation, only on success

DESIGN DECISION: A failed login is never terminal. Whatever the reason
(unknown user, wrong password, unreachable store), the flow tries to
create the account before giving up. Both stages produce the same
AuthOutcome so a single completion step decides what happens next.
"""

from typing import Mapping, Optional

from billed.diagnostics import DiagnosticLogger
from billed.models.session import (
    AuthOutcome,
    AuthStage,
    Credential,
    LoginResult,
    SessionIdentity,
    UserType,
)
from billed.routes import Navigator, landing_route
from billed.services.session import SessionStoreInterface, write_identity
from billed.services.store import RemoteStoreInterface
from billed.util import compact_json


class LoginFlow:
    """
    Orchestrates sign-in for both login forms.

    Collaborators are injected; the flow holds no state between attempts.
    """

    def __init__(
        self,
        store: Optional[RemoteStoreInterface],
        session_store: SessionStoreInterface,
        navigate: Navigator,
        diagnostics: Optional[DiagnosticLogger] = None,
    ):
        self.store = store
        self._session_store = session_store
        self._navigate = navigate
        self._diagnostics = diagnostics or DiagnosticLogger()

    async def handle_submit_employee(self, email: str, password: str) -> AuthOutcome:
        return await self.handle_submit(UserType.EMPLOYEE, email, password)

    async def handle_submit_admin(self, email: str, password: str) -> AuthOutcome:
        return await self.handle_submit(UserType.ADMIN, email, password)

    async def handle_submit(
        self,
        user_type: UserType,
        email: str,
        password: str,
    ) -> AuthOutcome:
        """
        Run the whole sign-in pipeline for one form submission.

        Raises:
            pydantic.ValidationError: If email or password is empty
        """
        user_type = UserType(user_type)
        credential = Credential(email=email, password=password)

        result = await self.login(credential)
        if result.succeeded:
            outcome = AuthOutcome(
                user_type=user_type,
                email=credential.email,
                stage=AuthStage.LOGIN,
                succeeded=True,
                token=result.token,
            )
            await self._diagnostics.log_login_succeeded(credential.email, user_type.value)
        else:
            await self._diagnostics.log_login_rejected(
                credential.email, user_type.value, result.error or "unknown error"
            )
            outcome = await self.create_account(user_type, credential)
            if outcome is None:
                await self._diagnostics.log_account_creation_skipped(credential.email)
                outcome = AuthOutcome(
                    user_type=user_type,
                    email=credential.email,
                    stage=AuthStage.CREATE_ACCOUNT,
                    succeeded=False,
                    error="No remote store configured",
                )

        return self._complete(outcome)

    async def login(self, credential: Credential) -> LoginResult:
        """
        Login stage. Never raises; every failure becomes a failed result.
        """
        if not self.store:
            return LoginResult(succeeded=False, error="No remote store configured")

        payload = compact_json({"email": credential.email, "password": credential.password})
        try:
            answer = await self.store.login(payload)
        except Exception as e:
            return LoginResult(succeeded=False, error=str(e) or e.__class__.__name__)

        token = answer.get("jwt") if isinstance(answer, Mapping) else None
        return LoginResult(succeeded=True, token=token)

    async def create_account(
        self,
        user_type: UserType,
        credential: Credential,
    ) -> Optional[AuthOutcome]:
        """
        Fallback stage: create the account the login did not find.

        Returns None without doing anything when no store is configured.
        A rejection is reported, not retried.
        """
        if not self.store:
            return None

        payload = compact_json({
            "type": user_type.value,
            "name": credential.account_name,
            "email": credential.email,
            "password": credential.password,
        })
        try:
            await self.store.users().create(data=payload)
        except Exception as e:
            error = str(e) or e.__class__.__name__
            await self._diagnostics.log_account_creation_failed(
                credential.email, user_type.value, error
            )
            return AuthOutcome(
                user_type=user_type,
                email=credential.email,
                stage=AuthStage.CREATE_ACCOUNT,
                succeeded=False,
                error=error,
            )

        await self._diagnostics.log_account_created(credential.email, user_type.value)
        return AuthOutcome(
            user_type=user_type,
            email=credential.email,
            stage=AuthStage.CREATE_ACCOUNT,
            succeeded=True,
        )

    def _complete(self, outcome: AuthOutcome) -> AuthOutcome:
        """Persist the identity and navigate, for successful outcomes only."""
        if not outcome.succeeded:
            return outcome

        identity = SessionIdentity(
            type=outcome.user_type,
            email=outcome.email,
            token=outcome.token,
        )
        write_identity(self._session_store, identity)

        route = landing_route(outcome.user_type).value
        self._navigate(route)
        return outcome.model_copy(update={"route": route})
