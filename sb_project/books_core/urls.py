from django.urls import path

from . import views

app_name = "books_core"

urlpatterns = [
    path("companies/<slug:slug>/payments/", views.payments_view,
         name="payments"),
    path("companies/<slug:slug>/journal/", views.journal_view, name="journal"),
    path("companies/<slug:slug>/reports/trial-balance/",
         views.trial_balance_view, name="trial-balance"),
    path("companies/<slug:slug>/reports/aging/<str:kind_slug>/",
         views.aging_view, name="aging"),
    path("companies/<slug:slug>/sales-orders/", views.sales_orders_view,
         name="sales-orders"),
    path("companies/<slug:slug>/sales-orders/<int:pk>/<str:action>/",
         views.sales_order_action_view, name="sales-order-action"),
    path("companies/<slug:slug>/catalog/<str:resource>/",
         views.catalog_create_view, name="catalog-create"),
    # invoices / bills
    path("companies/<slug:slug>/<str:kind_slug>/", views.documents_view,
         name="documents"),
    path("companies/<slug:slug>/<str:kind_slug>/<int:pk>/",
         views.document_detail_view, name="document-detail"),
    path("companies/<slug:slug>/<str:kind_slug>/<int:pk>/<str:action>/",
         views.document_transition_view, name="document-transition"),
]
