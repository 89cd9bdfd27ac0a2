"""
URL configuration for the weisus project.

The timeline app owns the site root.
"""
from django.urls import include, path
from django.views.generic import TemplateView

urlpatterns = [
    path('', include(('timeline.urls', 'timeline'), namespace='timeline')),
    path('about/', TemplateView.as_view(template_name='about.html'), name='about'),
]
