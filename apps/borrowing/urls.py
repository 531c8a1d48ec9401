from django.urls import path
from . import views

urlpatterns = [
    path('borrow-requests', views.create_borrow_request, name='create-borrow-request'),
    path('borrow-requests/<int:request_id>/approve', views.approve_borrow_request, name='approve-borrow-request'),
    path('borrow-requests/<int:request_id>/deny', views.deny_borrow_request, name='deny-borrow-request'),
    path('borrow-requests/<int:request_id>/return', views.return_borrow_request, name='return-borrow-request'),
    path('my-requests', views.my_requests, name='my-requests'),
    path('my-items/requests', views.requests_for_my_items, name='my-items-requests'),
]
