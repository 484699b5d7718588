from html import escape

from src.app.services.mailer import OutboundEmail

APP_NAME = "AI Career Assistant"
SUPPORT_ADDRESS = "support@aicareerassistant.com"


def build_password_reset_email(to: str, reset_url: str, expires_in_minutes: int) -> OutboundEmail:
    safe_url = escape(reset_url, quote=True)

    text = (
        f"{APP_NAME} - Password Reset\n"
        "\n"
        "Hi there!\n"
        "\n"
        f"We received a request to reset your password for your {APP_NAME} account.\n"
        "\n"
        "Click this link to create a new password:\n"
        f"{reset_url}\n"
        "\n"
        f"This link will expire in {expires_in_minutes} minutes for your security.\n"
        "\n"
        "If you didn't request this password reset, you can safely ignore this email.\n"
        "Your password won't be changed until you use the link above.\n"
        "\n"
        "---\n"
        f"{APP_NAME}\n"
        f"Need help? Contact us at {SUPPORT_ADDRESS}\n"
    )

    html = f"""
    <div style="max-width: 600px; margin: 0 auto; font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; color: #333;">
      <div style="background: #1E40AF; padding: 32px; text-align: center; border-radius: 12px 12px 0 0;">
        <h1 style="color: white; margin: 0;">Password Reset</h1>
        <p style="color: #E0E7FF; margin: 8px 0 0 0;">{APP_NAME}</p>
      </div>
      <div style="background: white; padding: 32px; border-radius: 0 0 12px 12px;">
        <p>We received a request to reset your password for your {APP_NAME} account.
        Click the button below to create a new password:</p>
        <p style="text-align: center; margin: 32px 0;">
          <a href="{safe_url}" style="background: #3B82F6; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px;">Reset My Password</a>
        </p>
        <p style="font-size: 14px; color: #6B7280;">Or copy and paste this link:<br>
          <span style="word-break: break-all; font-family: monospace;">{safe_url}</span></p>
        <p style="font-size: 14px; color: #92400E;"><strong>This link expires in {expires_in_minutes} minutes</strong> for your security.</p>
        <p style="font-size: 14px; color: #6B7280;">If you didn't request this password reset, you can safely ignore this email.
        Your password won't be changed until you click the link above.</p>
        <hr style="border: none; border-top: 1px solid #E5E7EB;">
        <p style="color: #9CA3AF; font-size: 13px; text-align: center;">{APP_NAME}<br>
          Need help? Contact us at {SUPPORT_ADDRESS}<br>
          This is an automated email, please don't reply to this address.</p>
      </div>
    </div>
    """

    return OutboundEmail(
        to=to,
        subject=f"Reset Your Password - {APP_NAME}",
        text=text,
        html=html,
    )
