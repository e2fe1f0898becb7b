"""
URL configuration for the refunds platform.

URL Structure:
    /admin/    - Django admin (refund requests and logs are read-only audit views)

The refund engine has no HTTP surface of its own: refund operations are
invoked through refunds.adapters.get_refund_orchestrator() by the forms
layer and by Celery workers.

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import path

urlpatterns = [
    path("admin/", admin.site.urls),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Refunds Admin"
admin.site.site_title = "Refunds Admin"
admin.site.index_title = "Orders, payments and refunds"
