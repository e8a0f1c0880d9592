# newsroom/services/ad_service.py
# Resolución de anuncios: un id puede ser un grupo o un anuncio suelto
from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from newsroom.schemas.delivery import AdBundle, AdGroupOut, AdOut
from newsroom.services.context import ResolveContext
from newsroom.services.sanitizer import decode_entities
from newsroom.stores.contracts import AdGroupRecord, AdRecord
from newsroom.utils.values import stripslashes, to_int

logger = logging.getLogger(__name__)

# Envoltorio para un anuncio suelto: misma forma que un grupo
SINGLE_AD_GROUP = AdGroupRecord(
    id=0,
    name="Single Advertisement",
    modus=0,
    adspeed=0,
    repeat_impressions="N",
    gridrows=1,
    gridcolumns=1,
)

FOLDER_TOKEN = "%folder%"


def tracking_data(ad_id: int, requested_id: int) -> str:
    raw = f"{ad_id},{requested_id},0".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def _first_attr(html: str, tag: str, attr: str) -> str:
    if not html or f"<{tag}" not in html.lower():
        return ""
    node = BeautifulSoup(html, "html.parser").find(tag, attrs={attr: True})
    return str(node[attr]) if node is not None else ""


def ad_image_url(ctx: ResolveContext, ad: AdRecord, html: str, banner_folder: str) -> str:
    site = ctx.site_url.rstrip("/")
    if ad.image:
        return ad.image.replace(FOLDER_TOKEN, f"{site}/wp-content/{banner_folder}")
    src = _first_attr(html, "img", "src")
    if src and "http" not in src:
        src = f"{site}/{src.lstrip('/')}"
    return src


def _format_ad(ctx: ResolveContext, ad: AdRecord, requested_id: int, banner_folder: str) -> AdOut:
    html = stripslashes(decode_entities(ad.bannercode))
    return AdOut(
        id=ad.id,
        title=decode_entities(ad.title),
        image_url=ad_image_url(ctx, ad, html, banner_folder),
        click_url=_first_attr(html, "a", "href"),
        tracker_status=ad.tracker,
        tracking_data=tracking_data(ad.id, requested_id),
        bannercode=stripslashes(ad.bannercode),
    )


def get_full_ad_data(ctx: ResolveContext, ad_ref: Any) -> Optional[Dict[str, Any]]:
    """
    Devuelve {group, ads} para un id de grupo o de anuncio suelto.
    - Primero como grupo: todos los anuncios activos enlazados (orden del store).
    - Si no, como anuncio activo: grupo sintético id=0 con un único anuncio.
    - Id no numérico, <= 0 o inexistente -> None.
    """
    store = ctx.stores.ads
    if store is None:
        return None
    requested_id = to_int(ad_ref)
    if requested_id <= 0:
        return None

    group = store.get_group(requested_id)
    ads: List[AdRecord]
    if group is not None:
        ads = store.active_group_ads(requested_id)
    else:
        single = store.get_active_ad(requested_id)
        if single is None:
            logger.debug("Ad reference %s matches no group or active ad", requested_id)
            return None
        group = SINGLE_AD_GROUP
        ads = [single]

    banner_folder = store.banner_folder()
    bundle = AdBundle(
        group=AdGroupOut(
            id=group.id,
            name=group.name,
            modus=group.modus,
            adspeed=group.adspeed,
            repeat_impressions=group.repeat_impressions,
            gridrows=group.gridrows,
            gridcolumns=group.gridcolumns,
        ),
        ads=[_format_ad(ctx, ad, requested_id, banner_folder) for ad in ads],
    )
    return bundle.model_dump()


# -------------------- Anuncios dentro del contenido del post --------------------
POST_ADS_OPTION_KEYS = (
    "better_ads_post",
    "better_ads_options",
    "better_ads_settings",
)
POST_AD_POSITIONS = ("above_post_content", "inside_post_content", "middle_post_content", "below_post_content")
POST_AD_GROUP_NAMES = {
    "above_post_content": ("Above Article", "Above Post", "above_post"),
    "below_post_content": ("Below Article", "Below Post", "below_post"),
    "middle_post_content": ("Middle Post", "Middle Article", "middle_post"),
}


def _position_ad_id(config: Any) -> int:
    if isinstance(config, dict):
        ad_id = to_int(config.get("ad_id") or config.get("group_id") or config.get("id"))
        if ad_id <= 0 and config.get("type") == "banner":
            ad_id = to_int(config.get("data") or config.get("banner_id"))
        return ad_id
    return to_int(config)


def get_post_content_ads(ctx: ResolveContext) -> Dict[str, Optional[dict]]:
    """
    Anuncios por posición dentro del artículo (arriba/dentro/medio/abajo).
    Lee la primera opción del gestor de anuncios que tenga valor; si no hay
    ninguna, busca grupos por nombre ("Above Article", ...).
    """
    settings_store = ctx.stores.settings
    plugin_settings = None
    if settings_store is not None:
        for key in POST_ADS_OPTION_KEYS:
            value = settings_store.get_option(key)
            if value:
                plugin_settings = value
                break

    result: Dict[str, Optional[dict]] = {}
    if isinstance(plugin_settings, dict):
        ad_settings = plugin_settings.get("post_ads") or plugin_settings
        for position in POST_AD_POSITIONS:
            ad_id = _position_ad_id(ad_settings.get(position)) if ad_settings.get(position) else 0
            result[position] = get_full_ad_data(ctx, ad_id) if ad_id > 0 else None
        return result

    if ctx.stores.ads is None:
        return result
    for position, names in POST_AD_GROUP_NAMES.items():
        result[position] = None
        for name in names:
            group = ctx.stores.ads.find_group_by_name(name)
            if group is not None:
                result[position] = get_full_ad_data(ctx, group.id)
                break
    return result
