from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'registry'

router = DefaultRouter()
router.register(r'companies', views.CompanyViewSet, basename='company')
router.register(r'employees', views.EmployeeViewSet, basename='employee')
router.register(r'vehicles', views.VehicleViewSet, basename='vehicle')

urlpatterns = [
    path('', include(router.urls)),
]
