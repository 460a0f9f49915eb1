from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'users'

router = DefaultRouter()
router.register(r'users', views.UserViewSet, basename='user')

urlpatterns = [
    # Authentication
    path('login/', views.login, name='login'),
    path('password/change/', views.password_change, name='password-change'),

    # Current user
    path('user/', views.get_current_user, name='current-user'),
    path('user/permissions/', views.my_permissions, name='my-permissions'),

    # User administration
    # GET    /api/auth/users/                        - List users
    # POST   /api/auth/users/                        - Create user
    # GET    /api/auth/users/{id}/                   - Get user
    # PATCH  /api/auth/users/{id}/                   - Edit user
    # POST   /api/auth/users/{id}/toggle_visibility/ - Hide/show user
    # GET    /api/auth/users/{id}/permissions/       - Page permissions
    # PUT    /api/auth/users/{id}/permissions/       - Replace page permissions
    path('', include(router.urls)),
]
