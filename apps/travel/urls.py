from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'travel'

router = DefaultRouter()
router.register(r'boxes', views.TravelCashBoxViewSet, basename='box')
router.register(r'advances', views.AdvanceViewSet, basename='advance')

urlpatterns = [
    # Boxes
    # GET    /api/travel/boxes/                        - List boxes
    # POST   /api/travel/boxes/                        - Create box
    # GET    /api/travel/boxes/{id}/                   - Box detail
    # PATCH  /api/travel/boxes/{id}/                   - Edit box
    # DELETE /api/travel/boxes/{id}/                   - Hide box
    # PUT    /api/travel/boxes/{id}/entries/           - Replace entries
    # POST   /api/travel/boxes/{id}/toggle_visibility/ - Hide/show box
    # GET    /api/travel/boxes/{id}/settlement/        - Settlement PDF
    # GET    /api/travel/boxes/next_number/?employee=  - Next number and opening balance
    # POST   /api/travel/boxes/recalculate/            - Recalculate balances
    # GET    /api/travel/boxes/stats/                  - Statistics
    #
    # Advances
    # POST   /api/travel/advances/{id}/apply/          - Link to a box
    # POST   /api/travel/advances/{id}/unapply/        - Unlink from its box
    path('', include(router.urls)),
]
