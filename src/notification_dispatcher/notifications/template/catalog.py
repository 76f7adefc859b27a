"""Default email templates registered at startup."""

from __future__ import annotations

from ..delivery import NotificationChannel
from ..ports.renderer import NotificationTemplate

EMAIL = NotificationChannel.EMAIL

DEFAULT_TEMPLATES: tuple[NotificationTemplate, ...] = (
    # Auth
    NotificationTemplate(
        event_type="auth.user.registered",
        channel=EMAIL,
        name="User Registration",
        subject_template="Welcome to xshopai!",
        body_template=(
            "Hello {{name}},\n\n"
            "Welcome to xshopai! Your account has been successfully created.\n\n"
            "You will receive a separate email to verify your email address.\n\n"
            "Thank you for joining us!"
        ),
    ),
    NotificationTemplate(
        event_type="auth.email.verification.requested",
        channel=EMAIL,
        name="Email Verification",
        subject_template="Verify your email address",
        body_template=(
            "Hello {{username}},\n\n"
            "Welcome to xshopai! Please verify your email address by clicking "
            "the link below:\n\n"
            "{{verificationUrl}}\n\n"
            "This link will expire in 24 hours.\n\n"
            "If you did not create an account, please ignore this email.\n\n"
            "Thank you!"
        ),
    ),
    NotificationTemplate(
        event_type="auth.password.reset.requested",
        channel=EMAIL,
        name="Password Reset",
        subject_template="Reset your password",
        body_template=(
            "Hello {{username}},\n\n"
            "You requested a password reset. Click the link below to reset "
            "your password:\n\n"
            "{{resetUrl}}\n\n"
            "This link will expire in 1 hour.\n\n"
            "If you did not request this, please ignore this email.\n\n"
            "Thank you!"
        ),
    ),
    NotificationTemplate(
        event_type="auth.password.reset.completed",
        channel=EMAIL,
        name="Password Reset Confirmed",
        subject_template="Your password has been reset",
        body_template=(
            "Hello {{username}},\n\n"
            "Your password has been successfully reset.\n\n"
            "If you did not make this change, please contact support immediately."
        ),
    ),
    # Orders
    NotificationTemplate(
        event_type="order.placed",
        channel=EMAIL,
        name="Order Confirmation",
        subject_template="Order Confirmed - #{{orderNumber}}",
        body_template=(
            "Hello,\n\n"
            "Your order #{{orderNumber}} has been placed successfully.\n\n"
            "Order ID: {{orderId}}\n"
            "Amount: ${{totalAmount}}\n\n"
            "Thank you for your purchase!"
        ),
    ),
    NotificationTemplate(
        event_type="order.cancelled",
        channel=EMAIL,
        name="Order Cancelled",
        subject_template="Order Cancelled - #{{orderNumber}}",
        body_template=(
            "Hello,\n\n"
            "Your order #{{orderNumber}} has been cancelled.\n\n"
            "Order ID: {{orderId}}\n"
            "Reason: {{cancellationReason}}\n\n"
            "If you did not request this cancellation, please contact support."
        ),
    ),
    NotificationTemplate(
        event_type="order.shipped",
        channel=EMAIL,
        name="Order Shipped",
        subject_template="Your order is on its way! - #{{orderNumber}}",
        body_template=(
            "Hello,\n\n"
            "Great news! Your order #{{orderNumber}} has been shipped.\n\n"
            "Order ID: {{orderId}}\n"
            "Tracking Number: {{trackingNumber}}\n\n"
            "You can track your order status in your account.\n\n"
            "Thank you for shopping with us!"
        ),
    ),
    NotificationTemplate(
        event_type="order.delivered",
        channel=EMAIL,
        name="Order Delivered",
        subject_template="Your order has been delivered - #{{orderNumber}}",
        body_template=(
            "Hello,\n\n"
            "Great news! Your order #{{orderNumber}} has been delivered.\n\n"
            "Order ID: {{orderId}}\n\n"
            "We hope you enjoy your purchase!"
        ),
    ),
    # Payments
    NotificationTemplate(
        event_type="payment.received",
        channel=EMAIL,
        name="Payment Received",
        subject_template="Payment Received",
        body_template=(
            "Hello,\n\n"
            "We have received your payment of ${{amount}} for order {{orderId}}.\n\n"
            "Payment ID: {{paymentId}}\n\n"
            "Thank you!"
        ),
    ),
    NotificationTemplate(
        event_type="payment.failed",
        channel=EMAIL,
        name="Payment Failed",
        subject_template="Payment Failed",
        body_template=(
            "Hello,\n\n"
            "Your payment of ${{amount}} for order {{orderId}} has failed.\n\n"
            "Reason: {{reason}}\n\n"
            "Please try again or contact support."
        ),
    ),
)
