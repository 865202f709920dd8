# properties/urls.py

from django.urls import path
from . import views

app_name = 'properties'

urlpatterns = [
    path('properties/',
         views.property_list_create,
         name='property_list_create'),

    path('properties/<int:property_id>/',
         views.property_detail,
         name='property_detail'),

    path('properties/<int:property_id>/state/',
         views.change_property_state,
         name='change_property_state'),
]
