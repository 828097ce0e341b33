from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework_simplejwt.tokens import RefreshToken

from .models import University, User
from .serializers import (
    AccountStatusSerializer,
    LoginSerializer,
    RegisterSerializer,
    UniversitySerializer,
    UserSerializer,
)
from .services import InvalidStatusTransition, change_account_status, pending_users


class UniversityListView(APIView):
    """
    GET: List universities available at registration.
    """
    permission_classes = (AllowAny,)
    authentication_classes = []

    def get(self, request):
        serializer = UniversitySerializer(University.objects.all(), many=True)
        return Response(serializer.data)


class RegisterView(APIView):
    """
    Register a new student (passenger or driver). The account stays pending
    until an admin approves it, so no tokens are issued here.

    POST Body:
    {
        "username": "rana",
        "email": "rana@aub.edu.lb",
        "password": "password123",
        "role": "passenger",  // or "driver"
        "gender": "female",
        "university": 1,
        "whatsapp": "+96170000000",
        "gender_preference": "same",  // passengers
        "car_brand": "Toyota", "car_model": "Corolla", "car_year": 2015,
        "car_color": "white", "plate_number": "B 123456", "cylinders": 4  // drivers
    }
    """
    permission_classes = (AllowAny,)
    authentication_classes = []

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        if serializer.is_valid():
            user = serializer.save()

            return Response({
                'message': 'Registration submitted. Your account is pending approval.',
                'user': UserSerializer(user).data,
            }, status=status.HTTP_201_CREATED)

        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class LoginView(APIView):
    """
    Login with username and password to get JWT tokens.
    Only approved accounts can log in.

    POST Body:
    {
        "username": "rana",
        "password": "password123"
    }
    """
    permission_classes = (AllowAny,)
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        # Get the user object from the validated data
        user = serializer.validated_data

        # Generate JWT tokens
        refresh = RefreshToken.for_user(user)

        return Response({
            "message": "Login successful",
            "user": UserSerializer(user).data,
            "tokens": {
                "refresh": str(refresh),
                "access": str(refresh.access_token)
            }
        }, status=status.HTTP_200_OK)


class RefreshTokenView(APIView):
    """
    Refresh JWT access token

    POST Body:
    {
        "refresh": "your_refresh_token"
    }
    """
    permission_classes = (AllowAny,)
    authentication_classes = []

    def post(self, request):
        refresh_token = request.data.get('refresh')

        if not refresh_token:
            return Response(
                {'error': 'Refresh token is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            refresh = RefreshToken(refresh_token)
            return Response({
                'access': str(refresh.access_token)
            })
        except Exception:
            return Response(
                {'error': 'Invalid refresh token'},
                status=status.HTTP_401_UNAUTHORIZED
            )


class PendingUsersView(APIView):
    """
    GET: Registrations waiting for admin review.
    """
    permission_classes = [IsAdminUser]

    def get(self, request):
        users = pending_users()
        return Response({
            "count": users.count(),
            "users": UserSerializer(users, many=True).data,
        })


class UserStatusView(APIView):
    """
    POST: Approve, reject or ban a user.

    POST Body:
    {
        "status": "approved"  // or "rejected" / "banned"
    }
    """
    permission_classes = [IsAdminUser]

    def post(self, request, user_id):
        user = User.objects.filter(id=user_id).first()
        if user is None:
            return Response({"error": "User not found"}, status=status.HTTP_404_NOT_FOUND)

        serializer = AccountStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            change_account_status(user, serializer.validated_data["status"], actor=request.user)
        except InvalidStatusTransition as e:
            return Response({"error": str(e)}, status=status.HTTP_409_CONFLICT)

        return Response({
            "message": f"User status updated to {user.status}",
            "user": UserSerializer(user).data,
        })
