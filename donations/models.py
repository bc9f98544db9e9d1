from django.db import models


class QueuedConfirmation(models.Model):
    """Payment confirmation held locally while the backend was unreachable."""

    STATUS_CHOICES = [
        ("QUEUED", "QUEUED"),
        ("SENT", "SENT"),
        ("FAILED", "FAILED"),
    ]
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    method = models.CharField(max_length=32, default="UPI")
    utr = models.CharField(max_length=64, db_index=True)
    name = models.CharField(max_length=128, blank=True, default="")
    mobile = models.CharField(max_length=16)
    purpose = models.CharField(max_length=128, default="Donation")
    payload = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, db_index=True, default="QUEUED")
    attempts = models.PositiveIntegerField(default=0)
    last_error = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    sent_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f"{self.utr} {self.status} ₹{self.amount}"
