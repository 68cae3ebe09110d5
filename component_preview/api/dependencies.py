from __future__ import annotations

from fastapi import Depends, HTTPException, status

from ..app import AppState, get_app_state


def previews_enabled(state: AppState = Depends(get_app_state)) -> AppState:
    if not state.preview_config.show_previews:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Previews are disabled")
    return state
