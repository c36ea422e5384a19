from lxml import etree


def xmlstring(root) -> str:
    if isinstance(root, str):
        return root
    if isinstance(root, bytes):
        return root.decode("utf-8", "replace")
    if hasattr(root, "xmlelement"):
        root = root.xmlelement()
    try:
        return etree.tostring(root, pretty_print=True).decode("utf-8")
    except TypeError:
        return str(root)
