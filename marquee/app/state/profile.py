"""User profile and account settings.

Every settings change is applied optimistically: ``ProfileUpdating`` carries
the expected profile, ``ProfileUpdated`` carries the profile the data source
returned together with a confirmation message, and the container then settles
back on ``ProfileLoaded``. A failed change shows ``ProfileFailure`` and restores
the profile that was loaded before.
"""

from __future__ import annotations

import logging
import re
from typing import Any, AsyncIterator, Dict, Union

from marquee.shared.core.container import StateContainer
from marquee.shared.core.errors import FetchError, MarqueeError, ValidationError
from marquee.shared.core.intents import Intent, Snapshot
from marquee.shared.core.optimistic import OptimisticUpdate
from marquee.shared.domain.catalog import CatalogSource, SubscriptionPlan, UserProfile, VideoQuality

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")


# --- Intents ---

class LoadProfile(Intent):
    pass


class UpdateUsername(Intent):
    username: str


class UpdateEmail(Intent):
    email: str


class ToggleNotifications(Intent):
    enabled: bool


class ToggleDarkMode(Intent):
    enabled: bool


class ChangeLanguage(Intent):
    language: str


class ChangeVideoQuality(Intent):
    quality: VideoQuality


class UpdateSubscriptionPlan(Intent):
    plan: SubscriptionPlan


class LogoutUser(Intent):
    pass


class DeleteAccount(Intent):
    pass


# --- Snapshots ---

class ProfileInitial(Snapshot):
    pass


class ProfileLoading(Snapshot):
    pass


class ProfileLoaded(Snapshot):
    profile: UserProfile


class ProfileUpdating(Snapshot):
    profile: UserProfile
    message: str


class ProfileUpdated(Snapshot):
    profile: UserProfile
    message: str


class ProfileLoggedOut(Snapshot):
    pass


class ProfileDeleted(Snapshot):
    pass


class ProfileFailure(Snapshot):
    message: str


ProfileState = Union[
    ProfileInitial,
    ProfileLoading,
    ProfileLoaded,
    ProfileUpdating,
    ProfileUpdated,
    ProfileLoggedOut,
    ProfileDeleted,
    ProfileFailure,
]


class ProfileContainer(StateContainer[ProfileState]):

    def __init__(self, source: CatalogSource, *, name: str = "profile") -> None:
        super().__init__(ProfileInitial(), name=name, error_snapshot=lambda message: ProfileFailure(message=message))
        self._source = source

        self.on(LoadProfile, self._on_load)
        self.on(UpdateUsername, self._on_update_username)
        self.on(UpdateEmail, self._on_update_email)
        self.on(ToggleNotifications, self._on_toggle_notifications)
        self.on(ToggleDarkMode, self._on_toggle_dark_mode)
        self.on(ChangeLanguage, self._on_change_language)
        self.on(ChangeVideoQuality, self._on_change_video_quality)
        self.on(UpdateSubscriptionPlan, self._on_update_subscription_plan)
        self.on(LogoutUser, self._on_logout)
        self.on(DeleteAccount, self._on_delete_account)

    async def _on_load(self, intent: LoadProfile, state: ProfileState) -> AsyncIterator[ProfileState]:
        yield ProfileLoading()
        try:
            profile = await self._source.fetch_profile()
        except FetchError as exc:
            yield ProfileFailure(message=f"Failed to load profile: {exc}")
            return
        yield ProfileLoaded(profile=profile)

    async def _on_update_username(self, intent: UpdateUsername, state: ProfileState) -> AsyncIterator[ProfileState]:
        username = intent.username.strip()
        if not username:
            async for snapshot in self._reject(state, ValidationError("Username must not be empty")):
                yield snapshot
            return
        async for snapshot in self._change(
            state, {"username": username}, "Updating username...", "Username updated successfully!"
        ):
            yield snapshot

    async def _on_update_email(self, intent: UpdateEmail, state: ProfileState) -> AsyncIterator[ProfileState]:
        email = intent.email.strip()
        if not EMAIL_PATTERN.fullmatch(email):
            async for snapshot in self._reject(state, ValidationError(f"Invalid email address: {email!r}")):
                yield snapshot
            return
        async for snapshot in self._change(
            state, {"email": email}, "Updating email...", "Email updated successfully!"
        ):
            yield snapshot

    async def _on_toggle_notifications(self, intent: ToggleNotifications, state: ProfileState) -> AsyncIterator[ProfileState]:
        done = "Notifications enabled" if intent.enabled else "Notifications disabled"
        async for snapshot in self._change(
            state, {"notifications_enabled": intent.enabled}, "Updating notifications...", done
        ):
            yield snapshot

    async def _on_toggle_dark_mode(self, intent: ToggleDarkMode, state: ProfileState) -> AsyncIterator[ProfileState]:
        done = "Dark mode enabled" if intent.enabled else "Light mode enabled"
        async for snapshot in self._change(
            state, {"dark_mode_enabled": intent.enabled}, "Updating theme...", done
        ):
            yield snapshot

    async def _on_change_language(self, intent: ChangeLanguage, state: ProfileState) -> AsyncIterator[ProfileState]:
        language = intent.language.strip()
        if not language:
            async for snapshot in self._reject(state, ValidationError("Language must not be empty")):
                yield snapshot
            return
        async for snapshot in self._change(
            state, {"language": language}, "Updating language...", f"Language changed to {language}"
        ):
            yield snapshot

    async def _on_change_video_quality(self, intent: ChangeVideoQuality, state: ProfileState) -> AsyncIterator[ProfileState]:
        async for snapshot in self._change(
            state,
            {"video_quality": intent.quality},
            "Updating video quality...",
            f"Video quality changed to {intent.quality.label}",
        ):
            yield snapshot

    async def _on_update_subscription_plan(self, intent: UpdateSubscriptionPlan, state: ProfileState) -> AsyncIterator[ProfileState]:
        async for snapshot in self._change(
            state,
            {"subscription_plan": intent.plan},
            "Updating subscription...",
            f"Subscription updated to {intent.plan.label}!",
        ):
            yield snapshot

    async def _on_logout(self, intent: LogoutUser, state: ProfileState) -> AsyncIterator[ProfileState]:
        if isinstance(state, ProfileLoaded):
            yield ProfileUpdating(profile=state.profile, message="Logging out...")
        try:
            await self._source.sign_out()
        except MarqueeError as exc:
            yield ProfileFailure(message=f"Failed to log out: {exc}")
            yield state
            return
        yield ProfileLoggedOut()

    async def _on_delete_account(self, intent: DeleteAccount, state: ProfileState) -> AsyncIterator[ProfileState]:
        if not isinstance(state, ProfileLoaded):
            logger.debug(f"{self.name}: {intent.tag} ignored in {state.tag}")
            return
        yield ProfileUpdating(profile=state.profile, message="Deleting account...")
        try:
            await self._source.delete_account()
        except MarqueeError as exc:
            yield ProfileFailure(message=f"Failed to delete account: {exc}")
            yield state
            return
        logger.info(f"{self.name}: account '{state.profile.username}' deleted")
        yield ProfileDeleted()

    async def _reject(self, state: ProfileState, error: ValidationError) -> AsyncIterator[ProfileState]:
        if not isinstance(state, ProfileLoaded):
            return
        yield ProfileFailure(message=str(error))
        yield state

    async def _change(
        self,
        state: ProfileState,
        changes: Dict[str, Any],
        progress: str,
        done: str,
    ) -> AsyncIterator[ProfileState]:
        if not isinstance(state, ProfileLoaded):
            logger.debug(f"{self.name}: profile change {sorted(changes)} ignored in {state.tag}")
            return

        expected = state.profile.model_copy(update=changes)

        async def confirm(profile: UserProfile) -> ProfileState:
            return ProfileUpdated(profile=profile, message=done)

        update: OptimisticUpdate[ProfileState, UserProfile] = OptimisticUpdate(
            apply_optimistic=lambda prior: ProfileUpdating(profile=expected, message=progress),
            commit_on_success=confirm,
            compensate_on_failure=lambda prior, message: ProfileFailure(
                message=f"Failed to update profile: {message}"
            ),
            settle_unconfirmed=lambda prior: ProfileUpdated(profile=expected, message=done),
            owner=self.name,
        )
        async for snapshot in update.run(
            "profile", state, lambda: self._source.update_profile(**changes), label=progress.rstrip(".")
        ):
            yield snapshot

        current = self.state
        if isinstance(current, ProfileUpdated):
            yield ProfileLoaded(profile=current.profile)
