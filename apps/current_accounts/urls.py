from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'current_accounts'

router = DefaultRouter()
router.register(r'accounts', views.CurrentAccountViewSet, basename='account')

urlpatterns = [
    # GET    /api/current-accounts/accounts/                        - List accounts
    # POST   /api/current-accounts/accounts/                        - Create account
    # GET    /api/current-accounts/accounts/{id}/                   - Account detail
    # PATCH  /api/current-accounts/accounts/{id}/                   - Edit account
    # DELETE /api/current-accounts/accounts/{id}/                   - Hide account
    # PUT    /api/current-accounts/accounts/{id}/entries/           - Replace entries
    # POST   /api/current-accounts/accounts/{id}/add_entry/         - Append one entry
    # POST   /api/current-accounts/accounts/{id}/toggle_visibility/ - Hide/show account
    # GET    /api/current-accounts/accounts/{id}/document/          - Account PDF
    # GET    /api/current-accounts/accounts/stats/                  - Statistics
    # GET    /api/current-accounts/accounts/summary/?owner=         - Per-user summary
    path('', include(router.urls)),
]
