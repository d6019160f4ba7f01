"""
Email Service using Resend

Sends verification codes, approval notices, registration notices and
signature invitations for the symposium registration flow.
"""

import asyncio
import logging
from html import escape

import resend

logger = logging.getLogger(__name__)

_STYLE = """
        <style>
            body { font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }
            .container { max-width: 600px; margin: 0 auto; padding: 40px 20px; }
            .header { color: #065f46; margin-bottom: 24px; }
            .button { display: inline-block; background-color: #10b981; color: white; padding: 12px 24px; text-decoration: none; border-radius: 4px; margin: 16px 0; }
            .code { font-size: 24px; color: #10b981; font-weight: bold; letter-spacing: 4px; }
            .summary-box { background-color: #f9fafb; border: 1px solid #e5e7eb; padding: 16px; border-radius: 8px; margin: 16px 0; }
            .footer { margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }
        </style>
"""

SIGNER_TITLES = {
    "teacher": "Science Research Advisor",
    "mentor": "Mentor",
    "parent": "Parent",
}


def _page(title: str, body: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head>{_STYLE}</head>
    <body>
        <div class="container">
            <h1 class="header">{title}</h1>
            {body}
            <div class="footer">
                <p>Best regards,<br>The NJSRS Team</p>
            </div>
        </div>
    </body>
    </html>
    """


def _link_block(url: str, label: str) -> str:
    return f"""
            <a href="{url}" class="button">{label}</a>
            <p>Or copy and paste this link into your browser:</p>
            <p style="word-break: break-all; color: #3b82f6;">{url}</p>
    """


class Mailer:
    """
    Transactional email sender.

    When no API key is configured, messages are logged instead of sent so
    local development works without a Resend account.
    """

    def __init__(self, api_key: str | None, sender: str, base_url: str):
        self.api_key = api_key
        self.sender = sender
        self.base_url = base_url.rstrip("/")
        if api_key:
            resend.api_key = api_key

    async def send_email(self, to_email: str, subject: str, html_content: str) -> bool:
        """
        Send an email using Resend.

        Returns:
            True if the email was sent (or logged in development)
        """
        if not self.api_key:
            logger.warning("RESEND_API_KEY not set - logging email instead of sending")
            logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
            return True

        try:
            params: resend.Emails.SendParams = {
                "from": self.sender,
                "to": [to_email],
                "subject": subject,
                "html": html_content,
            }

            # Run sync Resend call in thread pool to avoid blocking event loop
            email = await asyncio.to_thread(resend.Emails.send, params)
            logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
            return True
        except Exception as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False

    # ============================================
    # Account emails
    # ============================================

    async def send_verification_code(self, to_email: str, user_name: str, code: str) -> bool:
        """Send the 6-digit account verification code."""
        safe_name = escape(user_name or "User")
        body = f"""
            <p>Dear {safe_name},</p>
            <p>Thank you for registering with the New Jersey Science Research Symposium.</p>
            <p>Your verification code is: <span class="code">{escape(code)}</span></p>
            <p>This code will expire in 24 hours.</p>
            <p>Please enter this code on the verification page to complete your registration.</p>
            <p>If you did not register for NJSRS, please ignore this email.</p>
        """
        return await self.send_email(
            to_email=to_email,
            subject="Verify Your NJSRS Account",
            html_content=_page("Welcome to NJSRS!", body),
        )

    # ============================================
    # Approval notices
    # ============================================

    async def send_student_approved(
        self, to_email: str, student_name: str, advisor_name: str
    ) -> bool:
        """Tell a student their advisor approved the registration."""
        body = f"""
            <p>Dear {escape(student_name)},</p>
            <p>Your registration has been approved by your Science Research Advisor,
            <strong>{escape(advisor_name)}</strong>.</p>
            <p>You can now upload your research materials and request signatures.</p>
            {_link_block(f"{self.base_url}/dashboard/student", "Go to Your Dashboard")}
        """
        return await self.send_email(
            to_email=to_email,
            subject="NJSRS Registration Approved",
            html_content=_page("Your Registration Has Been Approved!", body),
        )

    async def send_advisor_approved(
        self, to_email: str, advisor_name: str, school_name: str
    ) -> bool:
        """Tell an advisor the fair director approved their registration."""
        body = f"""
            <p>Dear {escape(advisor_name)},</p>
            <p>Great news! Your Science Research Advisor registration has been approved by the Fair Director.</p>
            <p>You can now access your dashboard to manage students from {escape(school_name)}.</p>
            {_link_block(f"{self.base_url}/dashboard/sra", "Access Your Dashboard")}
        """
        return await self.send_email(
            to_email=to_email,
            subject="NJSRS SRA Registration Approved",
            html_content=_page("Your SRA Registration Has Been Approved!", body),
        )

    async def send_judge_approved(self, to_email: str, judge_name: str) -> bool:
        """Tell a judge their application was accepted."""
        body = f"""
            <p>Dear {escape(judge_name)},</p>
            <p>Thank you for volunteering. Your judge registration has been approved.</p>
            {_link_block(f"{self.base_url}/dashboard/judge", "Access Your Dashboard")}
        """
        return await self.send_email(
            to_email=to_email,
            subject="NJSRS Judge Registration Approved",
            html_content=_page("Your Judge Registration Has Been Approved!", body),
        )

    # ============================================
    # Registration notices
    # ============================================

    async def send_new_student_notice(
        self,
        to_email: str,
        advisor_name: str,
        student_id: str,
        student_name: str,
        student_email: str,
        school_name: str,
        grade: str,
        project_title: str | None,
    ) -> bool:
        """Ask an advisor to review a newly registered student."""
        review_url = f"{self.base_url}/dashboard/sra?approve={student_id}"
        body = f"""
            <p>Dear {escape(advisor_name)},</p>
            <p>A new student from {escape(school_name)} has registered for the New Jersey Science
            Research Symposium and selected you as their Science Research Advisor.</p>
            <div class="summary-box">
                <p><strong>Student Information:</strong></p>
                <ul>
                    <li>Name: {escape(student_name)}</li>
                    <li>Email: {escape(student_email)}</li>
                    <li>Grade: {escape(grade)}</li>
                    <li>Project Title: {escape(project_title or "Not provided")}</li>
                </ul>
            </div>
            <p>Please log in to your dashboard to review and approve this student's registration.</p>
            {_link_block(review_url, "Review Registration")}
        """
        return await self.send_email(
            to_email=to_email,
            subject="New Student Registration - Approval Required",
            html_content=_page("New Student Registration", body),
        )

    async def send_new_registration_notice(
        self, to_email: str, kind: str, name: str, email: str, detail: str | None = None
    ) -> bool:
        """Tell an administrator that an advisor or judge needs review."""
        detail_item = f"<li><strong>Details:</strong> {escape(detail)}</li>" if detail else ""
        body = f"""
            <p>A new {escape(kind)} has registered and requires admin review:</p>
            <div class="summary-box">
                <ul>
                    <li><strong>Name:</strong> {escape(name)}</li>
                    <li><strong>Email:</strong> {escape(email)}</li>
                    {detail_item}
                </ul>
            </div>
            {_link_block(f"{self.base_url}/dashboard/admin", "Open Admin Dashboard")}
        """
        return await self.send_email(
            to_email=to_email,
            subject=f"New {kind.title()} Registration - Review Required",
            html_content=_page(f"New {escape(kind.title())} Registration", body),
        )

    # ============================================
    # Signature invitations
    # ============================================

    async def send_statement_invitation(
        self, to_email: str, student_name: str, signer_type: str, token: str
    ) -> bool:
        """Invite a teacher, mentor or parent to sign the outside assistance statement."""
        signer_title = SIGNER_TITLES.get(signer_type, "Signer")
        invitation_url = f"{self.base_url}/statement-sign/{token}"
        body = f"""
            <p>Dear {signer_title},</p>
            <p>{escape(student_name)} has requested your signature on their Statement of Outside
            Assistance form for the New Jersey Science Research Symposium (NJSRS).</p>
            <p>Please click the link below to complete your section of the form and provide your electronic signature:</p>
            {_link_block(invitation_url, "Complete Form &amp; Sign")}
            <p>If you did not expect this email, please ignore it.</p>
        """
        return await self.send_email(
            to_email=to_email,
            subject=f"NJSRS Statement of Outside Assistance - {signer_title} Signature Required",
            html_content=_page("Statement of Outside Assistance - Signature Required", body),
        )

    async def send_photo_release_invitation(
        self, to_email: str, student_name: str, token: str
    ) -> bool:
        """Invite a parent or guardian to sign the photo release."""
        invitation_url = f"{self.base_url}/photo-release-sign/{token}"
        body = f"""
            <p>Dear Parent/Guardian,</p>
            <p>{escape(student_name)} has requested your signature on the Photo Release Form for
            the New Jersey Science Research Symposium (NJSRS).</p>
            <p>Please click the link below to complete and sign the photo release form:</p>
            {_link_block(invitation_url, "Complete &amp; Sign Photo Release Form")}
            <p>If you did not expect this email, please ignore it.</p>
        """
        return await self.send_email(
            to_email=to_email,
            subject="NJSRS Photo Release Form - Signature Required",
            html_content=_page("Photo Release Form - Signature Required", body),
        )

    async def send_chaperone_invitation(
        self, to_email: str, chaperone_name: str, school_name: str, token: str
    ) -> bool:
        """Ask a chaperone to confirm they will accompany a school's students."""
        invitation_url = f"{self.base_url}/chaperone-confirm/{token}"
        body = f"""
            <p>Dear {escape(chaperone_name)},</p>
            <p>You have been designated as the chaperone for students from
            <strong>{escape(school_name)}</strong> at the New Jersey Science Research Symposium.</p>
            <p>Please confirm your role and provide your electronic signature:</p>
            {_link_block(invitation_url, "Confirm Chaperone Role")}
            <p>If you did not expect this email, please ignore it.</p>
        """
        return await self.send_email(
            to_email=to_email,
            subject="NJSRS Chaperone Confirmation Required",
            html_content=_page("Chaperone Confirmation Required", body),
        )
