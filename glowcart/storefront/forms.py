from django import forms

from .services.checkout import PAYMENT_METHODS, delivery_region

INPUT_CLASS = "form-control bg-elevate"


def _region_choices(value):
    return [("", "Select"), (value, value), ("Other", "Other")]


class ShippingForm(forms.Form):
    """
    Checkout form. Fields are optional at form level: required-field and
    delivery-region rules belong to the checkout coordinator, which reports
    them with the customer-facing messages.
    """

    name = forms.CharField(required=False, max_length=120,
                           widget=forms.TextInput(attrs={"class": INPUT_CLASS, "placeholder": "Enter name"}))
    email = forms.CharField(required=False, max_length=254,
                            widget=forms.EmailInput(attrs={"class": INPUT_CLASS, "placeholder": "Enter email"}))
    phone = forms.CharField(required=False, max_length=20,
                            widget=forms.TextInput(attrs={"class": INPUT_CLASS, "placeholder": "Enter phone"}))
    address = forms.CharField(required=False, max_length=255,
                              widget=forms.TextInput(attrs={"class": INPUT_CLASS, "placeholder": "Enter address"}))
    pincode = forms.CharField(required=False, max_length=10,
                              widget=forms.TextInput(attrs={"class": INPUT_CLASS, "placeholder": "Enter pincode"}))
    state = forms.ChoiceField(required=False, widget=forms.Select(attrs={"class": INPUT_CLASS}))
    city = forms.ChoiceField(required=False, widget=forms.Select(attrs={"class": INPUT_CLASS}))
    payment_method = forms.ChoiceField(
        choices=list(PAYMENT_METHODS.items()),
        initial='cod',
        widget=forms.RadioSelect,
    )
    latitude = forms.CharField(required=False, widget=forms.HiddenInput)
    longitude = forms.CharField(required=False, widget=forms.HiddenInput)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        city, state = delivery_region()
        self.fields['state'].choices = _region_choices(state)
        self.fields['city'].choices = _region_choices(city)

    @classmethod
    def initial_from_profile(cls, profile=None, session_user=None):
        """Prefill values: API profile first, then whatever the JWT carries."""
        initial = {'payment_method': 'cod'}
        if session_user is not None:
            initial.update({
                'name': session_user.name,
                'email': session_user.email,
                'phone': session_user.phone,
            })
        if profile is not None:
            candidates = {
                'name': profile.name,
                'email': profile.email,
                'phone': profile.phone,
                'pincode': profile.pincode,
                'address': profile.address.street,
                'city': profile.address.city,
                'state': profile.address.state,
            }
            initial.update({key: value for key, value in candidates.items() if value})
        return initial


class LoginForm(forms.Form):
    email = forms.EmailField(
        label="Email",
        widget=forms.EmailInput(attrs={"class": INPUT_CLASS}),
    )
    password = forms.CharField(
        label="Password",
        widget=forms.PasswordInput(attrs={"class": INPUT_CLASS}),
    )
