from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class GingerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "ginger"
    verbose_name = _("Ginger - Loyalty Ledger")
