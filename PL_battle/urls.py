from django.urls import path
from . import views

urlpatterns = [
    path("api/types/", views.type_list, name="type-list"),
    path("api/weakness/", views.weakness_list, name="weakness-list"),

    path("api/pokemon/", views.pokemon_list, name="pokemon-list"),
    path("api/pokemon/<int:pk>/", views.pokemon_detail, name="pokemon-detail"),

    path("api/teams/", views.team_list, name="team-list"),
    path("api/teams/<int:pk>/", views.team_detail, name="team-detail"),

    path("api/battle/", views.battle, name="battle"),
]
