"""
api/mutations.py
----------------
Write side of the query/mutation contract.
Mutations that touch a sleep return the refreshed sleep view; None means
nothing was written or the sleep could not be read back.
"""

from typing import Optional

from sleeplog.api.queries import sleep_view
from sleeplog.api.types import (
    AddCommentToSleepInput,
    AddTagsToSleepInput,
    RemoveTagFromSleepInput,
    SleepInput,
    SleepView,
    TagInput,
    UpdateCommentInput,
    UpdateSleepInput,
    UpdateTagInput,
)
from sleeplog.models.comment import Comment
from sleeplog.models.tag import Tag
from sleeplog.services.sleep_service import INVALID_ID, SleepManager
from sleeplog.utils.logger import get_logger

logger = get_logger(__name__)


class SleepMutations:
    """Mutation root bound to one caller's SleepManager."""

    def __init__(self, manager: SleepManager):
        self.manager = manager

    def add_sleep(self, sleep_input: SleepInput) -> Optional[SleepView]:
        """
        Add a night, then attach its tags and comments if given.

        Tag and comment failures do not undo the sleep; the returned view
        reflects whatever was stored.
        """
        sleep_id = self.manager.insert_sleep(
            sleep_input.night, sleep_input.amount, sleep_input.quality
        )
        if sleep_id == INVALID_ID:
            return None

        if sleep_input.tags:
            if not self.manager.add_tags_to_sleep(sleep_id, sleep_input.tags):
                logger.warning(f"Not every tag could be attached to sleep #{sleep_id}")

        for comment in sleep_input.comments or []:
            self.manager.insert_comment(sleep_id, comment)

        return sleep_view(self.manager, sleep_id)

    def add_tag(self, tag_input: TagInput) -> Optional[Tag]:
        tag_id = self.manager.insert_tag(tag_input.name, tag_input.color)
        if tag_id == INVALID_ID:
            return None
        return self.manager.get_tag(tag_id)

    def add_tags_to_sleep(self, tags_input: AddTagsToSleepInput) -> Optional[SleepView]:
        self.manager.add_tags_to_sleep(tags_input.sleep_id, tags_input.tag_ids)
        return sleep_view(self.manager, tags_input.sleep_id)

    def add_comment_to_sleep(self, comment_input: AddCommentToSleepInput) -> Optional[SleepView]:
        self.manager.insert_comment(comment_input.sleep_id, comment_input.comment)
        return sleep_view(self.manager, comment_input.sleep_id)

    def delete_sleep(self, sleep_id: int) -> bool:
        return self.manager.delete_sleep(sleep_id)

    def delete_tag(self, tag_id: int) -> bool:
        return self.manager.delete_tag(tag_id)

    def delete_comment(self, comment_id: int) -> bool:
        return self.manager.delete_comment(comment_id)

    def update_sleep(self, sleep_input: UpdateSleepInput) -> Optional[SleepView]:
        """Update the non-None fields; None if nothing was updated."""
        quality_updated = (
            sleep_input.quality is not None
            and self.manager.update_sleep_quality(sleep_input.sleep_id, sleep_input.quality)
        )
        amount_updated = (
            sleep_input.amount is not None
            and self.manager.update_sleep_amount(sleep_input.sleep_id, sleep_input.amount)
        )
        if quality_updated or amount_updated:
            return sleep_view(self.manager, sleep_input.sleep_id)
        return None

    def update_tag(self, tag_input: UpdateTagInput) -> Optional[Tag]:
        """Update the non-None fields; None if nothing was updated."""
        name_updated = (
            tag_input.name is not None
            and self.manager.update_tag_name(tag_input.tag_id, tag_input.name)
        )
        color_updated = (
            tag_input.color is not None
            and self.manager.update_tag_color(tag_input.tag_id, tag_input.color)
        )
        if name_updated or color_updated:
            return self.manager.get_tag(tag_input.tag_id)
        return None

    def update_comment(self, comment_input: UpdateCommentInput) -> Optional[Comment]:
        if self.manager.update_comment(comment_input.comment_id, comment_input.comment):
            return self.manager.get_comment(comment_input.comment_id)
        return None

    def remove_tag_from_sleep(self, remove_input: RemoveTagFromSleepInput) -> Optional[SleepView]:
        if self.manager.remove_tag_from_sleep(remove_input.sleep_id, remove_input.tag_id):
            return sleep_view(self.manager, remove_input.sleep_id)
        return None
