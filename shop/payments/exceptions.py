"""
Erreurs du checkout, distinguables par l'appelant.
- Chaque erreur porte un status_code HTTP et un code stable, traduits une seule fois
  par les gestionnaires d'exceptions de l'application.
- CheckoutRedirect n'est pas une erreur: sortie non locale vers la page Stripe hébergée.
"""
from typing import Optional


class CheckoutError(Exception):
    status_code = 400
    code = "checkout_error"
    default_message = "Erreur de checkout"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class CartNotFound(CheckoutError):
    status_code = 404
    code = "cart_not_found"
    default_message = "Panier introuvable"


class EmptyCart(CheckoutError):
    status_code = 400
    code = "empty_cart"
    default_message = "Le panier est vide"


class SessionCreationFailed(CheckoutError):
    status_code = 502
    code = "session_creation_failed"
    default_message = "Échec de création de la session de paiement"


class CheckoutUrlUnavailable(CheckoutError):
    status_code = 502
    code = "checkout_url_unavailable"
    default_message = "URL de paiement indisponible"


class OrderIdMissing(CheckoutError):
    status_code = 400
    code = "order_id_missing"
    default_message = "Identifiant de commande absent des métadonnées Stripe"


class OrderNotFound(CheckoutError):
    status_code = 404
    code = "order_not_found"
    default_message = "Commande introuvable"


class CheckoutRedirect(Exception):
    """Interrompt la requête: l'appelant doit rediriger l'utilisateur vers `url`."""

    def __init__(self, url: str):
        super().__init__(url)
        self.url = url
