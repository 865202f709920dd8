# mandates/urls.py

from django.urls import path
from . import views

app_name = 'mandates'

urlpatterns = [
    path('properties/<int:property_id>/mandate/',
         views.property_mandate,
         name='property_mandate'),

    path('mandates/<int:mandate_id>/state/',
         views.change_mandate_state,
         name='change_mandate_state'),

    # Document endpoints
    path('properties/<int:property_id>/mandate/pdf/',
         views.download_mandate_pdf,
         name='download_mandate_pdf'),

    path('properties/<int:property_id>/mandate/word/',
         views.download_mandate_word,
         name='download_mandate_word'),
]
