from django.contrib import admin

from users.models import Profile, Store, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ["email", "first_name", "last_name", "is_staff", "is_active"]
    search_fields = ["email", "first_name", "last_name"]
    ordering = ["email"]


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ["user", "full_name", "role", "store", "total_points"]
    list_filter = ["role", "store"]
    readonly_fields = ["total_points"]


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ["name", "cnpj", "location", "is_active"]
    search_fields = ["name", "cnpj"]
