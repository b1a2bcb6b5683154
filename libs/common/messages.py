"""User-facing message catalog.

Code never branches on locale: it passes opaque keys plus parameters and
``t`` renders them. Unknown keys render as the key itself so a missing
translation is visible rather than fatal.
"""

from typing import Any

DEFAULT_LOCALE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        # cart
        "cart.added": "{product_name} added to cart",
        "cart.outOfStock": "{product_name} is out of stock.",
        "cart.onlyAvailable": "Only {count} {unit} available.",
        "cart.mixedSeller": "Your cart already holds produce from another farm. "
        "Check out or clear it before adding {product_name}.",
        "cart.productNotFound": "Product not found.",
        # orders
        "order.placed": "Order placed successfully!",
        "order.emptyCartOrNoSession": "Please log in and add items to your cart first.",
        "order.insufficientStock": "Insufficient stock for {product_name}. "
        "Only {count} {unit} available.",
        "order.insufficientWallet": "Insufficient wallet balance.",
        "order.notFound": "Order not found.",
        "order.invalidStatusTransition": "Order status cannot move from "
        "{current} to {requested}.",
        # accounts
        "auth.signupSuccess": "Welcome to HarvestHub, {full_name}!",
        "auth.welcomeBack": "Welcome back, {full_name}!",
        "auth.loggedOut": "You have been logged out.",
        "auth.duplicateAccount": "An account with this email already exists.",
        "auth.blocked": "Your account has been blocked.",
        "auth.invalidCredentials": "Invalid credentials.",
        "auth.notAuthenticated": "Please log in to continue.",
        "auth.permissionDenied": "You do not have permission to do that.",
        "auth.accountNotFound": "No account found for {email}.",
        "auth.resetLinkSent": "Password reset link sent to {email}.",
        "auth.profileUpdated": "Profile updated successfully.",
        "admin.userStatusUpdated": "User status updated.",
        # catalog
        "catalog.productAdded": "Product added successfully.",
        "catalog.productUpdated": "Product updated.",
        "catalog.productDeleted": "Product deleted.",
        "catalog.priceApplied": "Applied new price for {product_name}: {price}",
        # validation
        "validation.required": "{field} is required.",
        "validation.phone": "Please enter a valid 10-digit phone number.",
        "validation.pincode": "Please enter a valid 6-digit pincode.",
        "validation.quantity": "Quantity must be at least 1.",
        "validation.paymentMethod": "Please select a payment method.",
        "validation.invalid": "{field} is invalid.",
        # system
        "assistant.unavailable": "The assistant is unavailable right now. "
        "Please try again later.",
        "assistant.recipeFallback": "Sorry, I couldn't come up with a recipe "
        "right now. Please try again later.",
        "system.persistenceFailed": "We could not save your changes. "
        "Please try again shortly.",
    }
}


def t(key: str, /, locale: str = DEFAULT_LOCALE, **params: Any) -> str:
    """Translate ``key`` with ``params``; falls back to the default locale."""
    catalog = MESSAGES.get(locale) or MESSAGES[DEFAULT_LOCALE]
    template = catalog.get(key) or MESSAGES[DEFAULT_LOCALE].get(key)
    if template is None:
        return key
    try:
        return template.format(**params)
    except KeyError:
        return template
