"""
Community store: events with RSVP sets, and discussion posts with comments.

Events and posts are two separate persisted documents owned by one store.
Upcoming/past event lists and the post feed are computed on read and never
stored.
"""

from datetime import datetime, timedelta
from typing import Any

from carecompanion.config import CommunityConfig
from carecompanion.domain.models import (
    Clock,
    Comment,
    CommentCreate,
    Event,
    EventCreate,
    EventUpdate,
    Post,
    PostCreate,
    local_now,
    to_local_naive,
)
from carecompanion.services.collection import RecordCollection
from carecompanion.storage import (
    DEFAULT_KEY_PREFIX,
    EVENTS_KEY,
    POSTS_KEY,
    LocalStorage,
    PersistedDocument,
    storage_key,
)


class CommunityStore:
    """Owns the persisted events and posts."""

    def __init__(
        self,
        storage: LocalStorage,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        clock: Clock = local_now,
        config: CommunityConfig | None = None,
    ) -> None:
        self.config = config or CommunityConfig()
        self._clock = clock
        self._events: RecordCollection[Event] = RecordCollection(
            PersistedDocument(storage, storage_key(key_prefix, EVENTS_KEY), Event), "event"
        )
        self._posts: RecordCollection[Post] = RecordCollection(
            PersistedDocument(storage, storage_key(key_prefix, POSTS_KEY), Post), "post"
        )

    def _now(self) -> datetime:
        return to_local_naive(self._clock())

    @property
    def events(self) -> list[Event]:
        return self._events.records

    @property
    def posts(self) -> list[Post]:
        return self._posts.records

    def reload(self) -> None:
        self._events.reload()
        self._posts.reload()

    # Events

    def get_event(self, event_id: str) -> Event | None:
        return self._events.get(event_id)

    def add_event(self, data: EventCreate | dict[str, Any]) -> Event:
        data = EventCreate.model_validate(data)
        fields = data.model_dump()
        fields["organizer"] = data.organizer or self.config.default_organizer
        return self._events.append(Event(**fields))

    def update_event(self, event_id: str, patch: EventUpdate | dict[str, Any]) -> Event | None:
        patch = EventUpdate.model_validate(patch)
        changes = patch.model_dump(exclude_unset=True, exclude_none=True)
        return self._events.replace(event_id, lambda event: event.model_copy(update=changes))

    def delete_event(self, event_id: str) -> bool:
        return self._events.remove(event_id)

    def rsvp(
        self, event_id: str, user_id: str | None = None, attending: bool = True
    ) -> Event | None:
        """Add or remove ``user_id`` from the attendees.

        Repeating the same RSVP changes nothing and skips the write.
        """
        user_id = user_id or self.config.current_user_id
        event = self._events.get(event_id)
        if event is None:
            self._events.logger.warning("event_not_found", record_id=event_id)
            return None
        if (user_id in event.attendees) == attending:
            return event

        def apply(current: Event) -> Event:
            if attending:
                attendees = [*current.attendees, user_id]
            else:
                attendees = [a for a in current.attendees if a != user_id]
            return current.model_copy(update={"attendees": attendees})

        return self._events.replace(event_id, apply, action="rsvp_updated")

    def is_attending(self, event_id: str, user_id: str | None = None) -> bool:
        event = self._events.get(event_id)
        return event is not None and (user_id or self.config.current_user_id) in event.attendees

    def upcoming_events(self, now: datetime | None = None) -> list[Event]:
        """Events at or after ``now``, soonest first."""
        now = now or self._now()
        return sorted((e for e in self._events.records if e.date >= now), key=lambda e: e.date)

    def past_events(self, now: datetime | None = None) -> list[Event]:
        """Events before ``now``, most recent first."""
        now = now or self._now()
        return sorted(
            (e for e in self._events.records if e.date < now), key=lambda e: e.date, reverse=True
        )

    def events_within(
        self, days: int, limit: int | None = None, now: datetime | None = None
    ) -> list[Event]:
        now = now or self._now()
        horizon = now + timedelta(days=days)
        events = [e for e in self.upcoming_events(now) if e.date <= horizon]
        return events if limit is None else events[:limit]

    # Posts

    def get_post(self, post_id: str) -> Post | None:
        return self._posts.get(post_id)

    def add_post(self, data: PostCreate | dict[str, Any]) -> Post:
        data = PostCreate.model_validate(data)
        post = Post(
            title=data.title,
            content=data.content,
            author=data.author or self.config.default_author,
            created_at=self._now(),
        )
        return self._posts.append(post)

    def delete_post(self, post_id: str) -> bool:
        return self._posts.remove(post_id)

    def like_post(self, post_id: str) -> Post | None:
        # Not deduplicated per user: every call adds one
        return self._posts.replace(
            post_id, lambda post: post.model_copy(update={"likes": post.likes + 1}), action="liked"
        )

    def add_comment(self, post_id: str, data: CommentCreate | dict[str, Any]) -> Post | None:
        data = CommentCreate.model_validate(data)
        comment = Comment(
            author=data.author or self.config.default_author,
            text=data.text,
            created_at=self._now(),
        )
        return self._posts.replace(
            post_id,
            lambda post: post.model_copy(update={"comments": [*post.comments, comment]}),
            action="commented",
        )

    def sorted_posts(self) -> list[Post]:
        """Newest first."""
        return sorted(self._posts.records, key=lambda p: p.created_at, reverse=True)
