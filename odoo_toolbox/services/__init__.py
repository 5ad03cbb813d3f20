"""Domain services built on the core client."""

from odoo_toolbox.services.activities import ActivityService, resolve_activity_type_id
from odoo_toolbox.services.followers import FollowerService
from odoo_toolbox.services.mail import (
    SUBTYPE_COMMENT,
    SUBTYPE_NOTE,
    MailService,
    ensure_html_body,
    get_messages,
    post_internal_note,
    post_open_message,
)
from odoo_toolbox.services.properties import PropertiesService
