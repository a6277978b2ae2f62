"""
Drafts feature: state holder behind the "Add Event" form.

Owns one EventDraft, attaches an image through the ingestion pipeline and
submits through the repository once every field validates.
"""

import logging
from datetime import datetime

from volunteer_events.core.exceptions import AppBaseError, UploadInProgress
from volunteer_events.core.session import Session
from volunteer_events.features.drafts.schemas import EventDraft, ValidationResult
from volunteer_events.features.drafts.validator import validate
from volunteer_events.features.events.repository import EventRepository
from volunteer_events.features.events.schemas import Event, Position
from volunteer_events.features.images.pipeline import ImageIngestionPipeline
from volunteer_events.features.images.schemas import ImageResource, ImageSource

logger = logging.getLogger(__name__)


class EventComposer:
    def __init__(
        self,
        repository: EventRepository,
        pipeline: ImageIngestionPipeline,
        position: Position | None = None,
    ):
        self.repository = repository
        self.pipeline = pipeline
        self.draft = EventDraft(position=position)
        self.image: ImageResource | None = None
        self.uploading = False
        self.saving = False

    def update(self, **fields) -> EventDraft:
        """Set draft fields (name, description, volunteers_needed, date_time, position).

        Values are validated like a fresh draft: ISO strings become datetimes,
        unknown fields raise pydantic.ValidationError.
        """
        if "image_url" in fields:
            raise ValueError("image_url is set by attach_image()")
        self.draft = EventDraft.model_validate({**self.draft.model_dump(), **fields})
        return self.draft

    def validation(self, now: datetime | None = None) -> ValidationResult:
        return validate(self.draft, now=now)

    async def attach_image(self, source: ImageSource) -> ImageResource | None:
        """Run the image pipeline and attach its result to the draft.

        A cancelled pick keeps the current image. Any pipeline failure
        clears it and is re-raised for the UI.

        Raises:
            UploadInProgress: another attach is still running.
        """
        if self.uploading:
            raise UploadInProgress()

        self.uploading = True
        try:
            resource = await self.pipeline.ingest(source)
        except AppBaseError as e:
            logger.warning(f"Image attach failed: {e.message}")
            self._set_image(None)
            raise
        finally:
            self.uploading = False

        if resource is not None:
            self._set_image(resource)
        return resource

    def _set_image(self, resource: ImageResource | None) -> None:
        self.image = resource
        self.draft = self.draft.model_copy(
            update={"image_url": resource.url if resource else None}
        )

    async def save(self, session: Session, now: datetime | None = None) -> Event:
        """Re-validate at submission time and create the event."""
        self.saving = True
        try:
            event = await self.repository.create_event(self.draft, session, now=now)
        finally:
            self.saving = False

        self.draft = EventDraft()
        self.image = None
        return event
