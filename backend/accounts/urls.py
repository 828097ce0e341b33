from django.urls import path

from .views import (
    LoginView,
    PendingUsersView,
    RefreshTokenView,
    RegisterView,
    UniversityListView,
    UserStatusView,
)

app_name = "accounts"

urlpatterns = [
    path("universities/", UniversityListView.as_view(), name="universities"),
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("refresh/", RefreshTokenView.as_view(), name="refresh"),

    # Admin approval workflow
    path("admin/pending/", PendingUsersView.as_view(), name="pending-users"),
    path("admin/users/<int:user_id>/status/", UserStatusView.as_view(), name="user-status"),
]
