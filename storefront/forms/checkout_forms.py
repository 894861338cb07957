"""
Checkout forms.

The storefront posts JSON, so the form is fed an explicit MultiDict built from
the scalar contact/shipping fields; line items are validated by the order service.
"""
from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired, Length, Optional, Regexp

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


class CheckoutForm(FlaskForm):
    """Customer contact and shipping address submitted with an order."""

    class Meta:
        csrf = False

    customerName = StringField(
        'Name',
        validators=[DataRequired(message='Customer name is required'), Length(max=255)]
    )

    phone = StringField(
        'Phone',
        validators=[DataRequired(message='Phone is required'), Length(max=50)]
    )

    email = StringField(
        'Email',
        validators=[Optional(), Length(max=255), Regexp(EMAIL_PATTERN, message='Invalid email address')]
    )

    address = StringField(
        'Address',
        validators=[DataRequired(message='Address is required'), Length(max=500)]
    )

    city = StringField(
        'City',
        validators=[DataRequired(message='City is required'), Length(max=120)]
    )

    province = StringField(
        'Province',
        validators=[DataRequired(message='Province is required'), Length(max=120)]
    )

    postalCode = StringField(
        'Postal Code',
        validators=[Optional(), Length(max=20)]
    )

    def first_error(self):
        """First validation message, in field declaration order."""
        for field in self:
            if field.errors:
                return field.errors[0]
        return 'Invalid order data'
