from component_preview import Preview


class IconButtonPreview(Preview, layout="layouts/admin"):
    def default(self):
        return self.render_with_template(
            template="admin/icon_button_preview/custom",
            locals={"icon": "star"},
        )

    def plain(self):
        pass
