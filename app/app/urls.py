from django.contrib import admin
from django.urls import (path, include)
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView
)

from app.settings import ADMIN_URL

urlpatterns = [
    path(f'{ADMIN_URL}/', admin.site.urls),
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/',
         SpectacularSwaggerView.as_view(url_name="api-schema"),
         name='api-docs'),
    path('api/user/', include('user.urls')),
    path('api/', include('properties.urls', namespace='properties')),
    path('api/', include('mandates.urls', namespace='mandates')),
]
