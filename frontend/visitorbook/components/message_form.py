"""
VisitorBook Frontend: Message Form
====================================

What:  The "Leave a Message" form: two text fields and a submit action.

Submission state machine:

    IDLE → VALIDATING ─ invalid ─→ IDLE + "Please fill in all fields"
                      └ valid ──→ SUBMITTING
    SUBMITTING ─ success ─→ IDLE, fields cleared
               └ failure ─→ IDLE + "Failed to submit ...", fields kept

Submitting is a two-step workflow: record the visit (increment mutation),
then create the message. If the second step fails the visit stays counted;
there is no compensating decrement.
"""

import logging
from enum import Enum
from typing import Callable

from visitorbook.exceptions import VisitorBookClientError
from visitorbook.schemas import Message, MessageFormData, VisitorCount
from visitorbook.sync import Mutation

logger = logging.getLogger(__name__)

FILL_ALL_FIELDS_NOTICE = "Please fill in all fields"
SUBMIT_FAILED_NOTICE = "Failed to submit your message. Please try again."


class FormState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"


class MessageForm:
    """
    Form component bound to the increment and create-message mutations.

    Args:
        increment_visitor_count: Mutation for POST /api/visitors
        create_message: Mutation for POST /api/messages
        notify: Shows a blocking notice to the visitor (an alert)
    """

    title = "Leave a Message"

    def __init__(
        self,
        increment_visitor_count: Mutation[VisitorCount],
        create_message: Mutation[Message],
        notify: Callable[[str], None],
    ):
        self._increment_visitor_count = increment_visitor_count
        self._create_message = create_message
        self._notify = notify
        self.name = ""
        self.content = ""
        self.state = FormState.IDLE

    @property
    def is_submitting(self) -> bool:
        return self.state is FormState.SUBMITTING

    @property
    def submit_label(self) -> str:
        return "Submitting..." if self.is_submitting else "Submit Message"

    async def submit(self) -> bool:
        """
        Validate and send the form.

        Returns:
            True when both calls succeeded and the fields were cleared.
        """
        if self.is_submitting:
            # The submit button is disabled while a submission is in flight
            return False

        self.state = FormState.VALIDATING
        if not self.name.strip() or not self.content.strip():
            self.state = FormState.IDLE
            self._notify(FILL_ALL_FIELDS_NOTICE)
            return False

        self.state = FormState.SUBMITTING
        form = MessageFormData(name=self.name, content=self.content)
        try:
            await self._increment_visitor_count.mutate()
            await self._create_message.mutate(form)
        except VisitorBookClientError as e:
            logger.error("Error submitting message: %s", e.message)
            self._notify(SUBMIT_FAILED_NOTICE)
            return False
        finally:
            self.state = FormState.IDLE

        self.name = ""
        self.content = ""
        return True

    def render(self) -> str:
        return "\n".join([
            self.title,
            f"  Your Name:    {self.name}",
            f"  Your Message: {self.content}",
            f"  [ {self.submit_label} ]",
        ])
