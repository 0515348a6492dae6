# support/forms.py
from django import forms

from .models import ContactMessage


class ContactForm(forms.ModelForm):
    class Meta:
        model = ContactMessage
        fields = ["name", "email", "message"]

    def clean_message(self):
        text = (self.cleaned_data.get("message") or "").strip()
        if not text:
            raise forms.ValidationError("Message is required")
        return text
