# Components package init
"""
VisitorBook Frontend: Presentation Components
===============================================

Component Inventory:
    - MessageForm:       name/message fields, two-step submit
    - MessageList:       loading / error / messages
    - VisitorCountBadge: "Visitor Count: N"
"""

from visitorbook.components.message_form import FormState, MessageForm
from visitorbook.components.message_list import ListStatus, MessageList
from visitorbook.components.visitor_count import VisitorCountBadge

__all__ = ["FormState", "ListStatus", "MessageForm", "MessageList", "VisitorCountBadge"]
