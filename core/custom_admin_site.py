from django.contrib.admin import AdminSite
from django.utils.translation import gettext_lazy as _


class CoreAdminSite(AdminSite):
    site_header = _("Feed Translator Admin")
    site_title = _("Feed Translator")
    index_title = _("Dashboard")


core_admin_site = CoreAdminSite()
