from dropwin.infrastructure.email.providers.onesecmail.client import OneSecMailProvider
from dropwin.infrastructure.email.providers.onesecmail.mapper import raw_to_message, render_html_body

__all__ = ["OneSecMailProvider", "raw_to_message", "render_html_body"]
