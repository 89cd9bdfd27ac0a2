"""Timeline app URL configuration."""
from django.urls import path

from . import views

app_name = 'timeline'

urlpatterns = [
    path('', views.index, name='index'),
    path('events/<uuid:event_id>/', views.detail, name='detail'),
    path('api/events/', views.events_api, name='events_api'),
]
