"""
Authentication views для storefront приложения.

Login goes through the shop API, which answers with a JWT; the token is kept
in the session (see storefront.services.auth).
"""
import logging
from urllib.parse import urlencode

from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_POST

from ..forms import LoginForm
from ..services.api import ApiError
from .utils import get_shop_api

logger = logging.getLogger(__name__)


def _safe_next(request, fallback='home'):
    target = request.POST.get('next') or request.GET.get('next')
    if target and url_has_allowed_host_and_scheme(
        target, allowed_hosts={request.get_host()}, require_https=request.is_secure()
    ):
        return target
    return fallback


@never_cache
def login_view(request):
    """
    Вход покупателя.

    POST params:
        email, password: credentials checked by the shop API
        next: where to go after login
    """
    if request.auth.is_logged_in():
        return redirect(_safe_next(request))

    form = LoginForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        try:
            token = get_shop_api().login(form.cleaned_data['email'], form.cleaned_data['password'])
        except ApiError as e:
            logger.info("Login failed for %s: %s", form.cleaned_data['email'], e.message)
            form.add_error(None, e.message)
        else:
            request.auth.login(token)
            if request.auth.is_logged_in():
                user = request.auth.user
                messages.success(request, f"Welcome back, {user.display_name if user else 'there'}!")
                return redirect(_safe_next(request))
            request.auth.logout()
            form.add_error(None, "Login failed: the shop returned an unusable token")

    return render(request, 'storefront/pages/login.html', {
        'form': form,
        'next': request.POST.get('next') or request.GET.get('next', ''),
    })


@require_POST
def logout_view(request):
    request.auth.logout()
    messages.info(request, "You have been logged out")
    return redirect('home')


@never_cache
def profile_view(request):
    """
    Профиль покупателя: данные из токена и, если доступно, из API.
    """
    user = request.auth.user
    if user is None:
        return redirect(f"{reverse('login')}?{urlencode({'next': request.path})}")

    profile = None
    try:
        profile = get_shop_api().fetch_user_profile(user.user_id, token=request.auth.token)
    except ApiError as e:
        logger.warning("Failed to fetch profile for user %s: %s", user.user_id, e.message)

    return render(request, 'storefront/pages/profile.html', {
        'session_user': user,
        'profile': profile,
    })
