from django.db.models import Q
from rest_framework import status, viewsets, mixins, serializers
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema

from .models import User, Page
from .permissions import HasPagePermission
from .serializers import (
    UserSerializer,
    UserRegistrationSerializer,
    UserUpdateSerializer,
    UserLoginSerializer,
    PasswordChangeSerializer,
    PermissionsInputSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    change_password,
    update_user,
    toggle_user_visibility,
    get_user_permissions,
    replace_user_permissions,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class UserPagination(PageNumberPagination):
    """Custom pagination for users."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _tokens_for(user):
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_user(
            email=serializer.validated_data['email'],
            password=serializer.validated_data['password'],
        )
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    description="Get the page permission map of the current user.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_permissions(request):
    """Get the current user's page permissions."""
    return Response({'permissions': get_user_permissions(user=request.user)})


@extend_schema(
    request=PasswordChangeSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Change the current user's password.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def password_change(request):
    """Change password after confirming the current one."""
    serializer = PasswordChangeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        change_password(
            user=request.user,
            current_password=serializer.validated_data['current_password'],
            new_password=serializer.validated_data['new_password'],
        )
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'message': 'Password changed successfully'})


class UserViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet
):
    """
    ViewSet for user administration.

    list: Get visible users (``show_hidden=true`` includes hidden ones)
    create: Create a user
    retrieve: Get a user
    partial_update: Edit profile fields and role
    toggle_visibility: Hide or show a user
    permissions: Read or replace a user's page permissions
    """

    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, HasPagePermission]
    pagination_class = UserPagination
    permission_page = Page.USERS
    page_action_flags = {
        'toggle_visibility': 'can_delete',
        'permissions': 'can_edit',
    }

    def get_queryset(self):
        queryset = User.objects.all()
        if self.action == 'list' and self.request.query_params.get('show_hidden') != 'true':
            queryset = queryset.filter(is_hidden=False)
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(email__icontains=search) |
                Q(first_name__icontains=search) |
                Q(last_name__icontains=search)
            )
        return queryset

    @extend_schema(request=UserRegistrationSerializer, responses={201: UserSerializer})
    def create(self, request, *args, **kwargs):
        """Create a user."""
        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data.copy()
        data.pop('password_confirm', None)

        try:
            user = register_user(**data)
        except UserRegistrationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=UserUpdateSerializer, responses={200: UserSerializer})
    def partial_update(self, request, *args, **kwargs):
        """Edit a user's profile fields."""
        user = self.get_object()
        serializer = UserUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        user = update_user(user=user, **serializer.validated_data)
        return Response(UserSerializer(user).data)

    @action(detail=True, methods=['post'])
    def toggle_visibility(self, request, pk=None):
        """Hide or show a user."""
        user = self.get_object()
        if user == request.user:
            return Response(
                {'error': 'You cannot hide your own account'},
                status=status.HTTP_400_BAD_REQUEST
            )
        user = toggle_user_visibility(user=user)
        return Response(UserSerializer(user).data)

    @extend_schema(request=PermissionsInputSerializer)
    @action(detail=True, methods=['get', 'put'])
    def permissions(self, request, pk=None):
        """
        Read or replace a user's page permissions.

        GET /api/auth/users/{id}/permissions/
        PUT /api/auth/users/{id}/permissions/
        Body: {"permissions": {"travel_boxes": {"can_access": true}}}
        """
        user = self.get_object()

        if request.method == 'GET':
            return Response({'permissions': get_user_permissions(user=user)})

        serializer = PermissionsInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        permissions = replace_user_permissions(
            user=user,
            permissions=serializer.validated_data['permissions'],
        )
        return Response({
            'message': 'Permissions updated successfully',
            'permissions': permissions,
        })
