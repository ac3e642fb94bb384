SEND_INVITATION_EMAIL_URL = "/functions/v1/send-invitation-email"

TEMPLATES_URL = "/api/v1/templates"
EVENTS_URL = "/api/v1/events"
EVENT_URL = "/api/v1/events/{event_id}"

EVENT_INVITATIONS_URL = "/api/v1/events/{event_id}/invitations"
EVENT_INVITATION_SINGLE_URL = "/api/v1/events/{event_id}/invitations/single"
EVENT_INVITATION_STATS_URL = "/api/v1/events/{event_id}/invitations/stats"
EVENT_INVITATIONS_SEND_URL = "/api/v1/events/{event_id}/invitations/send"
INVITATION_URL = "/api/v1/invitations/{invitation_id}"
INVITATION_SEND_URL = "/api/v1/invitations/{invitation_id}/send"
EMAIL_STATUS_URL = "/api/v1/email/status"

RSVP_URL = "/api/v1/rsvp/{token}"
RSVP_OPENED_URL = "/api/v1/rsvp/{token}/opened"
