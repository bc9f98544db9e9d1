from django.contrib import admin
from .models import QueuedConfirmation

@admin.register(QueuedConfirmation)
class QueuedConfirmationAdmin(admin.ModelAdmin):
    list_display = ("id", "utr", "amount", "method", "mobile", "status", "attempts", "created_at", "sent_at")
    search_fields = ("utr", "mobile", "name")
    list_filter = ("status", "method", "created_at")
    readonly_fields = ("created_at", "sent_at", "payload", "last_error")
