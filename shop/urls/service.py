"""
Résolution des URLs publiques selon l'environnement de déploiement.
- get_base_url: VERCEL_URL (plateforme) > BASE_URL (configuré) > défaut local
- get_full_url: jointure base + chemin avec exactement un slash
- get_full_image_url: absolutise les images envoyées à Stripe (refuse les chemins relatifs)
"""
from typing import Optional
from urllib.parse import urlparse

from shop import config


class UrlService:
    def __init__(
        self,
        vercel_url: Optional[str] = None,
        base_url: Optional[str] = None,
        default_base_url: str = config.DEFAULT_BASE_URL,
    ):
        self.vercel_url = config.VERCEL_URL if vercel_url is None else vercel_url
        self.base_url = config.BASE_URL if base_url is None else base_url
        self.default_base_url = default_base_url

    def get_base_url(self) -> str:
        if self.vercel_url:
            return f"https://{self.vercel_url}"
        return self.base_url or self.default_base_url

    def get_full_url(self, path: str) -> str:
        base = self.get_base_url().rstrip("/")
        normalized = path if path.startswith("/") else f"/{path}"
        return f"{base}{normalized}"

    @staticmethod
    def is_valid_url(url: Optional[str]) -> bool:
        """Vrai si `url` est une URL absolue http(s) avec un hôte."""
        try:
            parsed = urlparse(url or "")
        except ValueError:
            return False
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)

    def get_full_image_url(self, image_url: Optional[str]) -> Optional[str]:
        """
        URL absolue d'une image produit, ou None si elle ne peut pas être résolue.
        - URL déjà absolue: retournée telle quelle
        - chemin relatif: préfixé par la base publique puis revalidé
        """
        if not image_url:
            return None
        if self.is_valid_url(image_url):
            return image_url
        base = self.get_base_url().rstrip("/")
        if not base:
            return None
        full = self.get_full_url(image_url)
        return full if self.is_valid_url(full) else None
