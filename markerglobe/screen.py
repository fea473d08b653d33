class ScreenProjector:
    '''Moves overlay elements to follow their anchors on screen

    Offsets are relative to the viewport center, elements are expected to be
    centered there before the offset is applied.  Visibility is left alone.
    '''

    def __init__(self, registry):
        self.registry = registry

    def update_screen_positions(self, entries, camera, viewport_width: float, viewport_height: float) -> None:
        for entry in entries:
            ndc = camera.project(self.registry.world_position(entry))
            # NDC up is screen up, pixel y grows down
            offset_x = float(ndc[0]) * viewport_width * 0.5
            offset_y = -float(ndc[1]) * viewport_height * 0.5
            entry.element.offset = (offset_x, offset_y)
