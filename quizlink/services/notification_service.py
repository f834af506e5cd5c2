"""
Notification Service - Email service using SendGrid
"""
import html
import logging
import sendgrid
from sendgrid.helpers.mail import Mail, Email, To, Content
from quizlink.core.config import settings
from quizlink.core.exceptions import TransportFailureError

logger = logging.getLogger(__name__)

# Singleton pattern for NotificationService
_notification_service_instance = None

def get_notification_service():
    global _notification_service_instance
    if _notification_service_instance is None:
        _notification_service_instance = NotificationService()
    return _notification_service_instance


class NotificationService:
    def __init__(self, api_key: str = None, from_email: str = None):
        self.sg = sendgrid.SendGridAPIClient(api_key=api_key or settings.SENDGRID_API_KEY)
        self.from_email = Email(from_email or settings.EMAIL_FROM)

    def send_email(self, to_email: str, subject: str, html_content: str) -> int:
        """Send one HTML mail; any transport problem becomes TransportFailureError"""
        mail = Mail(self.from_email, To(to_email), subject, Content("text/html", html_content))
        try:
            response = self.sg.client.mail.send.post(request_body=mail.get())
        except Exception as e:
            raise TransportFailureError(f"Email to {to_email} failed: {e}") from e
        if response.status_code >= 400:
            raise TransportFailureError(
                f"Email to {to_email} rejected with status {response.status_code}")
        logger.info(f"Sent '{subject}' to {to_email}")
        return response.status_code

    def send_assessment_invitation(self, candidate_email: str, candidate_name: str, assessment_title: str, assessment_url: str, expiry_hours: int = 48) -> int:
        subject = f"Assessment Invitation: {assessment_title}"
        html_content = f"""
            <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
                <h2 style="color: #2c3e50;">Dear {html.escape(candidate_name)},</h2>
                <p>You have been invited to take the <b>{html.escape(assessment_title)}</b> assessment.</p>
                <div style="background-color: #f8f9fa; padding: 15px; border-radius: 5px; margin: 20px 0;">
                    <ul>
                        <li>This link is valid for {expiry_hours} hours from the time it was generated</li>
                        <li>Once you start the assessment, you cannot pause or restart it</li>
                        <li>Make sure you have a stable internet connection</li>
                    </ul>
                </div>
                <p style="text-align: center;">
                    <a href="{html.escape(assessment_url)}" style="background-color: #10b981; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px;">Start Assessment</a>
                </p>
                <p style="color: #64748b; font-size: 12px;">This is an automated message. Please do not reply to this email.</p>
            </div>
        """
        return self.send_email(candidate_email, subject, html_content)

    def send_completion_confirmation(self, candidate_email: str, candidate_name: str, assessment_title: str, score: int, total_questions: int) -> int:
        subject = f"Assessment Completed: {assessment_title}"
        percentage = round(score / total_questions * 100) if total_questions else 0
        html_content = f"""
            <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
                <h2 style="color: #2c3e50;">Thank you, {html.escape(candidate_name)}!</h2>
                <p>Your submission for <b>{html.escape(assessment_title)}</b> has been recorded.</p>
                <div style="background-color: #f8f9fa; padding: 15px; border-radius: 5px; margin: 20px 0;">
                    <p><b>Score:</b> {score} / {total_questions} ({percentage}%)</p>
                </div>
                <p>Our team will review your results and get back to you.</p>
            </div>
        """
        return self.send_email(candidate_email, subject, html_content)
