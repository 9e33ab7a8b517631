"""
MJML Email Templates
Transactional emails for account lifecycle, compiled to HTML by the email service
"""

from html import escape
from typing import Optional

from .config import FRONTEND_URL

# App theme colors - SereniBook green
THEME = {
    "primary": "#1aa385",
    "primary_dark": "#14806a",
    "primary_light": "#d5f3ec",
    "background": "#f6f8f7",
    "card_bg": "#ffffff",
    "text_primary": "#1f2933",
    "text_secondary": "#3e4c59",
    "text_muted": "#7b8794",
    "border": "#e4e7eb",
}

FONT_STACK = "-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif"


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
    footer_notice: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section background-color="#ffffff" padding="0 40px 48px 40px">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="8px"
              padding="18px 40px"
              font-size="16px">
              {cta_label}
            </mj-button>
            <mj-text font-size="13px" color="{THEME['text_muted']}" padding="16px 0 0 0">
              Or copy this link into your browser:<br/>
              <a href="{cta_url}" style="color: {THEME['primary_dark']}; word-break: break-all;">{cta_url}</a>
            </mj-text>
          </mj-column>
        </mj-section>
        """

    notice = ""
    if footer_notice:
        notice = f"""
            <mj-text align="center" font-size="12px" color="#9aa5b1" padding="12px 0 0 0">
              {footer_notice}
            </mj-text>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="{FONT_STACK}" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <!-- Header -->
        <mj-section background-color="#ffffff" padding="32px 20px 16px 20px">
          <mj-column>
            <mj-text align="center" font-size="26px" font-weight="700" color="{THEME['primary']}" padding="0">
              SereniBook
            </mj-text>
          </mj-column>
        </mj-section>

        <mj-section background-color="#ffffff" padding="0 40px 32px 40px">
          <mj-column>
            <mj-divider border-color="{THEME['border']}" border-width="1px" padding="0" />
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="#ffffff" padding="0 40px 24px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <!-- Footer -->
        <mj-section padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="#9aa5b1" padding="0">
              © SereniBook. All rights reserved.
            </mj-text>
            {notice}
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def verification_email_template(user_name: Optional[str], verification_url: str) -> str:
    """Email address confirmation, link valid 24 hours"""
    greeting = f"Hi {escape(user_name)}," if user_name else "Hi,"
    content = f"""
    <mj-text>
      {greeting}
    </mj-text>

    <mj-text>
      Thanks for signing up to SereniBook. Please confirm your email address to
      secure your account and receive booking notifications.
    </mj-text>

    <mj-text color="{THEME['text_muted']}" font-size="14px">
      This link will expire in 24 hours.
    </mj-text>
    """

    return get_base_template(
        title="Confirm your email address",
        preview_text="Confirm your email address to activate your SereniBook account",
        content_sections=content,
        cta_url=verification_url,
        cta_label="Verify my email",
        footer_notice="You're receiving this because an account was created with this address.",
    )


def password_reset_template(user_name: Optional[str], reset_url: str) -> str:
    """Password reset link, valid 1 hour"""
    greeting = f"Hi {escape(user_name)}," if user_name else "Hi,"
    content = f"""
    <mj-text>
      {greeting}
    </mj-text>

    <mj-text>
      We received a request to reset your password. Click the button below to
      choose a new one. This link will expire in 1 hour.
    </mj-text>

    <mj-text color="{THEME['text_muted']}" font-size="14px">
      If you didn't request this, you can safely ignore this email. Your password won't be changed.
    </mj-text>
    """

    return get_base_template(
        title="Reset your password",
        preview_text="Reset your SereniBook password",
        content_sections=content,
        cta_url=reset_url,
        cta_label="Reset my password",
    )


def welcome_email_template(user_name: Optional[str], role: str) -> str:
    """Sent once onboarding is complete"""
    greeting = f"Hi {escape(user_name)}," if user_name else "Hi,"
    if role == "PROFESSIONAL":
        next_steps = """
      • Add the services you offer<br/>
      • Publish your weekly availability<br/>
      • Share your profile with your clients
        """
    else:
        next_steps = """
      • Discover wellness professionals near you<br/>
      • Book sessions in a few clicks<br/>
      • Keep track of your appointments
        """

    content = f"""
    <mj-text>
      {greeting}
    </mj-text>

    <mj-text>
      Your SereniBook profile is ready. Here is what you can do next:
    </mj-text>

    <mj-text padding="0 0 0 20px">
      {next_steps}
    </mj-text>
    """

    return get_base_template(
        title="Welcome to SereniBook!",
        preview_text="Your profile is ready",
        content_sections=content,
        cta_url=f"{FRONTEND_URL}/dashboard",
        cta_label="Go to my dashboard",
    )
