from django.urls import path
from . import views

urlpatterns = [
    path('items', views.items, name='items'),
    path('items/categories', views.categories, name='item-categories'),
    path('items/locations', views.locations, name='item-locations'),
    path('items/<int:item_id>', views.item_detail, name='item-detail'),
    path('my-items', views.my_items, name='my-items'),
]
