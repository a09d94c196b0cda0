from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),
    path('logout/', views.logout, name='logout'),

    # User profile
    path('user/', views.current_user, name='current-user'),
    path('users/lookup/', views.lookup_user, name='user-lookup'),

    # Friends
    path('friends/', views.friends, name='friends'),
]
