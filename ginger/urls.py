from django.urls import path

from . import views

app_name = "ginger"

urlpatterns = [
    # QR
    path("qr/scan", views.QRScanView.as_view(), name="qr-scan"),
    path("qr/validate", views.QRValidateView.as_view(), name="qr-validate"),
    path("qr/user/<int:user_id>", views.QRTokenView.as_view(), name="qr-token"),
    path("qr/redeem-reward", views.RedeemRewardView.as_view(), name="qr-redeem-reward"),
    # Points
    path("points/user/<int:user_id>", views.PointsBalanceView.as_view(), name="points-balance"),
    path(
        "points/transactions/<int:user_id>",
        views.TransactionHistoryView.as_view(),
        name="points-transactions",
    ),
    path("points/adjust", views.AdjustPointsView.as_view(), name="points-adjust"),
    path("points/can-scan", views.CanScanView.as_view(), name="points-can-scan"),
    # Rewards
    path("rewards/", views.RewardListView.as_view(), name="rewards"),
    path(
        "rewards/available/<int:points>",
        views.AvailableRewardView.as_view(),
        name="rewards-available",
    ),
    # Admin dashboard
    path("admin/staff", views.AdminStaffView.as_view(), name="admin-staff"),
    path("admin/analytics", views.AdminAnalyticsView.as_view(), name="admin-analytics"),
    path("admin/transactions", views.AdminTransactionsView.as_view(), name="admin-transactions"),
    path("admin/dashboard", views.AdminDashboardView.as_view(), name="admin-dashboard"),
    path("admin/rewards", views.AdminRewardListView.as_view(), name="admin-rewards"),
    path(
        "admin/rewards/<int:reward_id>",
        views.AdminRewardDetailView.as_view(),
        name="admin-reward-detail",
    ),
]
