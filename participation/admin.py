from django.contrib import admin

from participation.models import Event, ModerationLogEntry, Participant


class ParticipantInline(admin.TabularInline):
    model = Participant
    extra = 0
    readonly_fields = ["status", "waitlist_position", "registered_at"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "capacity", "waitlist_enabled", "version", "created_at"]
    search_fields = ["title"]
    readonly_fields = ["version"]
    inlines = [ParticipantInline]


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    list_display = ["user_id", "event", "status", "waitlist_position", "registered_at"]
    list_filter = ["status"]
    search_fields = ["user_id"]


@admin.register(ModerationLogEntry)
class ModerationLogEntryAdmin(admin.ModelAdmin):
    list_display = ["action", "user_id", "event", "actor_id", "occurred_at"]
    list_filter = ["action"]
