"""QR token model."""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class QRToken(models.Model):
    """
    Opaque string printed in the customer's QR code.

    1:1 with the customer, created lazily and never rotated. The payload
    follows the canonical scheme in ``ginger.services.qr``.
    """

    customer = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="qr_token",
        verbose_name=_("customer"),
    )
    token_data = models.CharField(_("token"), max_length=64, unique=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        db_table = "ginger_qr_token"
        verbose_name = _("QR token")
        verbose_name_plural = _("QR tokens")

    def __str__(self):
        return f"{self.customer_id}:{self.token_data}"
