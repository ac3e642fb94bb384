import html
from dataclasses import dataclass
from datetime import datetime

from synathrozo.dispatch.dtos import NotificationPayload
from synathrozo.events.dtos import DEFAULT_TEMPLATE_ID, format_event_date


@dataclass(frozen=True)
class TemplateStyle:
    bg: str
    accent: str
    text: str
    button: str


TEMPLATE_STYLES: dict[str, TemplateStyle] = {
    "shabby-chic": TemplateStyle(bg="#fef9f6", accent="#b87878", text="#806868", button="#c49090"),
    "modern-dark": TemplateStyle(bg="#1a1a2e", accent="#d4af37", text="#e0e0e0", button="#d4af37"),
    "garden-party": TemplateStyle(bg="#f0f7f0", accent="#4a7c59", text="#2d5a3d", button="#4a7c59"),
    "classic-formal": TemplateStyle(bg="#ffffff", accent="#2c2c2c", text="#333333", button="#2c2c2c"),
    "custom": TemplateStyle(bg="#ffffff", accent="#6366f1", text="#374151", button="#6366f1"),
}

DARK_TEMPLATES = frozenset({"modern-dark"})


def get_style(template_id: str | None) -> TemplateStyle:
    return TEMPLATE_STYLES.get(template_id or DEFAULT_TEMPLATE_ID, TEMPLATE_STYLES[DEFAULT_TEMPLATE_ID])


def display_date(payload: NotificationPayload) -> str:
    """Prefer the date the sender formatted in its own time zone."""
    if payload.formatted_event_date:
        return payload.formatted_event_date
    try:
        return format_event_date(datetime.fromisoformat(payload.event_date or ""))
    except ValueError:
        return payload.event_date or ""


@dataclass
class EmailTemplates:
    INVITATION_SUBJECT = "You're Invited: {event_title}"
    CONFIRMATION_SUBJECT = "RSVP Confirmed: {event_title}"

    HTML = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{heading}</title>
</head>
<body style="margin: 0; padding: 0; font-family: 'Georgia', serif; background-color: #f5f5f5;">
  <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="background-color: #f5f5f5; padding: 40px 20px;">
    <tr>
      <td align="center">
        <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="max-width: 500px; background-color: {bg}; border-radius: 12px; overflow: hidden;">
          <tr>
            <td style="padding: 30px 30px 20px; text-align: center; border-bottom: 1px solid {divider};">
              <p style="margin: 0 0 8px; font-size: 14px; color: {accent}; letter-spacing: 2px; text-transform: uppercase;">{heading}</p>
              <h1 style="margin: 0; font-size: 32px; font-weight: normal; color: {accent};">{event_title}</h1>
            </td>
          </tr>
          {image_section}
          <tr>
            <td style="padding: 24px 30px;">
              {greeting_section}
              <p style="margin: 0 0 20px; font-size: 16px; color: {text}; text-align: center; line-height: 1.6;">{intro}</p>
              <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="background-color: {panel}; border-radius: 8px; margin-bottom: 20px;">
                <tr>
                  <td style="padding: 20px; text-align: center;">
                    <p style="margin: 0 0 4px; font-size: 12px; color: {accent}; text-transform: uppercase; letter-spacing: 1px;">When</p>
                    <p style="margin: 0 0 16px; font-size: 16px; color: {text}; font-weight: 500;">{event_date}</p>
                    {location_section}
                  </td>
                </tr>
              </table>
              {description_section}
              {registry_section}
              <table role="presentation" width="100%" cellspacing="0" cellpadding="0">
                <tr>
                  <td align="center">
                    <a href="{rsvp_link}" style="display: inline-block; padding: 14px 40px; background-color: {button}; color: {button_text}; text-decoration: none; border-radius: 6px; font-size: 16px;">{button_label}</a>
                  </td>
                </tr>
              </table>
              <p style="margin: 20px 0 0; font-size: 13px; color: {muted}; text-align: center;">{footnote}</p>
            </td>
          </tr>
          <tr>
            <td style="padding: 20px 30px; text-align: center; border-top: 1px solid {divider};">
              <p style="margin: 0; font-size: 12px; color: {muted};">Sent with love via Synathrozo</p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""

    IMAGE_SECTION = """<tr>
            <td style="padding: 24px 30px 0;">
              <img src="{custom_image_url}" alt="Invitation" style="max-width: 100%; border-radius: 8px;" />
            </td>
          </tr>"""

    GREETING_SECTION = """<p style="margin: 0 0 20px; font-size: 18px; color: {text}; text-align: center; font-style: italic;">Dear {guest_name},</p>"""

    LOCATION_SECTION = """<p style="margin: 0 0 4px; font-size: 12px; color: {accent}; text-transform: uppercase; letter-spacing: 1px;">Where</p>
                    <p style="margin: 0; font-size: 16px; color: {text};">{event_location}</p>"""

    DESCRIPTION_SECTION = """<p style="margin: 0 0 24px; font-size: 15px; color: {text}; text-align: center; line-height: 1.7; font-style: italic;">"{event_description}"</p>"""

    REGISTRY_SECTION = """<p style="margin: 0 0 8px; font-size: 12px; color: {accent}; text-align: center; text-transform: uppercase; letter-spacing: 1px;">Gift Registry</p>
              <ul style="margin: 0 0 24px; padding: 0; list-style: none; text-align: center;">{items}</ul>"""

    REGISTRY_ITEM = """<li style="margin: 0 0 6px;"><a href="{url}" style="color: {accent};">{name}</a></li>"""

    TEXT = """{heading}: {event_title}

{greeting}{intro}

When: {event_date}
{location_line}{description_line}{registry_lines}
{button_label}: {rsvp_link}
"""

    @classmethod
    def render(cls, payload: NotificationPayload) -> tuple[str, str, str]:
        """Render an invitation or confirmation email.

        Returns: (subject, html_body, text_body)
        """
        style = get_style(payload.template_id)
        is_dark = payload.template_id in DARK_TEMPLATES
        confirming = payload.is_confirmation
        esc = html.escape

        event_title = payload.event_title or ""
        event_date = display_date(payload)

        if confirming:
            heading = "You're Confirmed"
            intro = "Thank you for your RSVP! We can't wait to celebrate with you."
            button_label = "View Your RSVP"
            footnote = "Plans changed? Use the button above to update your response."
            subject = cls.CONFIRMATION_SUBJECT.format(event_title=event_title)
        else:
            heading = "You're Invited"
            inviter = f"{payload.host_name} has" if payload.host_name else "You have been"
            intro = f"{inviter} invited you to celebrate this special occasion!"
            button_label = "RSVP Now"
            footnote = "Click the button above to let us know if you can make it!"
            subject = cls.INVITATION_SUBJECT.format(event_title=event_title)

        colors = {
            "accent": style.accent,
            "text": style.text,
        }

        image_section = ""
        if payload.custom_image_url:
            image_section = cls.IMAGE_SECTION.format(custom_image_url=esc(payload.custom_image_url))

        greeting_section = ""
        if payload.guest_name:
            greeting_section = cls.GREETING_SECTION.format(guest_name=esc(payload.guest_name), **colors)

        location_section = ""
        if payload.event_location:
            location_section = cls.LOCATION_SECTION.format(
                event_location=esc(payload.event_location), **colors
            )

        description_section = ""
        if payload.event_description:
            description_section = cls.DESCRIPTION_SECTION.format(
                event_description=esc(payload.event_description), **colors
            )

        registry_links = payload.registry_links if confirming else None
        registry_section = ""
        if registry_links:
            items = "".join(
                cls.REGISTRY_ITEM.format(url=esc(link.url), name=esc(link.name), accent=style.accent)
                for link in registry_links
            )
            registry_section = cls.REGISTRY_SECTION.format(items=items, accent=style.accent)

        html_body = cls.HTML.format(
            heading=heading,
            event_title=esc(event_title),
            event_date=esc(event_date),
            intro=esc(intro),
            rsvp_link=esc(payload.rsvp_link or ""),
            button_label=button_label,
            footnote=footnote,
            image_section=image_section,
            greeting_section=greeting_section,
            location_section=location_section,
            description_section=description_section,
            registry_section=registry_section,
            bg=style.bg,
            button=style.button,
            button_text="#1a1a2e" if is_dark else "#ffffff",
            divider="rgba(255,255,255,0.1)" if is_dark else "rgba(0,0,0,0.05)",
            panel="rgba(255,255,255,0.05)" if is_dark else "rgba(0,0,0,0.03)",
            muted="rgba(255,255,255,0.5)" if is_dark else "rgba(0,0,0,0.4)",
            **colors,
        )

        text_body = cls.TEXT.format(
            heading=heading,
            event_title=event_title,
            greeting=f"Dear {payload.guest_name},\n\n" if payload.guest_name else "",
            intro=intro,
            event_date=event_date,
            location_line=f"Where: {payload.event_location}\n" if payload.event_location else "",
            description_line=f"\n{payload.event_description}\n" if payload.event_description else "",
            registry_lines="".join(f"\n{link.name}: {link.url}" for link in registry_links or []),
            button_label=button_label,
            rsvp_link=payload.rsvp_link or "",
        )

        return subject, html_body, text_body
