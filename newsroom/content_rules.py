from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass
class LayoutRules:
    """
    Convenciones de nombres que gobiernan el resolver de campos.

    Son datos del tema, no lógica: qué campo marca un layout, qué nombres
    cuentan como referencia a un anuncio, qué layouts son "premium", etc.
    Un tema distinto puede registrar su propio juego de reglas.
    """
    # Marcador de layout: se revisa en este orden, gana la primera clave presente
    marker_keys: Tuple[str, ...] = ("acf_fc_layout", "type")

    # Sección agrupada cuyo layout efectivo es un sub-campo
    grouped_layout: str = "category_news_section"
    sub_layout_key: str = "news_layout"

    # Disparadores por nombre de layout
    category_key: str = "select_category"
    recent_token: str = "recent"
    trending_token: str = "trending"
    hero_layout: str = "hero_banner_section"
    youtube_layout: str = "youtube_section"
    show_sidebar_key: str = "show_sidebar"

    # Campos de conteo/offset (subcadena en el nombre del campo)
    count_tokens: Tuple[str, ...] = ("posts_per_page", "post_per_page", "limit")
    offset_tokens: Tuple[str, ...] = ("offset",)
    default_count: int = 5
    default_offset: int = 0

    # Over-fetch: layouts premium sin anuncio muestran un post extra
    premium_tokens: Tuple[str, ...] = ("politics", "sports", "feature")
    premium_ad_keys: Tuple[str, ...] = ("adrotate_ad_select", "advert_select", "select_advert")
    premium_bonus: int = 1

    # Trending: límite por defecto desde opciones (primera clave no vacía)
    trending_option_keys: Tuple[str, ...] = ("post_per_page", "trending_posts_per_page")
    trending_default_limit: int = 10

    # Sidebars
    youtube_sidebar: str = "custom-youtube-sidebar"
    generic_sidebar: str = "sidebar-1"

    # Referencias a anuncios dentro de un nodo
    ad_key_tokens: Tuple[str, ...] = ("advert_select", "adrotate_ad", "_advert")
    ad_position_keys: Tuple[str, ...] = ("select_advert_position", "advert_position")
    ad_target_key: str = "advert_code"
    # orden en que se elige el anuncio a intercalar
    ad_slot_order: Tuple[str, ...] = ("advert_code_top", "advert_code_bottom", "advert_code")

    # Imágenes por id y toggle de redes sociales
    media_key_pattern: str = r"(image|logo|icon|thumb)"
    social_toggle_key: str = "social_icons"
    social_items_option: str = "social_items"

    # Claves con HTML que no se limpia y subárboles ya resueltos
    html_keep_keys: Tuple[str, ...] = (
        "bannercode", "advert_code", "audio_player_html", "advert_code_top", "advert_code_bottom",
    )
    block_recursion_keys: Tuple[str, ...] = (
        "section_posts", "trending_posts", "global_options", "sidebar_data", "youtube_data", "section_items",
    )


def build_layout_rules(theme: str | None = None) -> LayoutRules:
    """
    Registry por tema. Hoy solo existe el tema "newsroom"; si se agregan otros,
    ramificar aquí.
    """
    return LayoutRules()
