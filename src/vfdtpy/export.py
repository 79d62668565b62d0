"""Text, rule and Graphviz renderings of a trained Hoeffding tree.

These helpers only read the tree through its public node interface.
"""
from __future__ import annotations

from .tree import HoeffdingTree


def _class_label(tree: HoeffdingTree, node, class_names=None) -> str:
    c = node.majority_class()
    if class_names is not None:
        return str(class_names[c])
    return str(tree.schema.class_attribute.values[c])


def _attr_name(internal, feature_names=None) -> str:
    if feature_names is not None and 0 <= internal.attribute_index < len(feature_names):
        return str(feature_names[internal.attribute_index])
    return internal.attribute.name


def _require_tree(tree: HoeffdingTree):
    if tree.root is None:
        raise ValueError("Tree not trained. Call train(...) first.")


def export_text(tree: HoeffdingTree, *, feature_names=None, class_names=None) -> str:
    """Render the tree as indented ``attribute = value`` lines.

    A leaf is rendered as ``: <class>`` after the branch that leads to it;
    a tree that is a single leaf renders as just that.
    """
    _require_tree(tree)

    def walk(node, level: int) -> str:
        if node.is_leaf():
            return ": " + _class_label(tree, node, class_names)
        internal = node.as_internal()
        name = _attr_name(internal, feature_names)
        parts = []
        for j, child in enumerate(internal.children):
            parts.append("\n" + "|  " * level + f"{name} = {internal.attribute.values[j]}")
            parts.append(walk(child, level + 1))
        return "".join(parts)

    return walk(tree.root, 0)


def export_rules(tree: HoeffdingTree, *, feature_names=None, class_names=None) -> list[str]:
    """One ``<antecedent> => <class>`` string per leaf, left to right."""
    _require_tree(tree)
    rules: list[str] = []

    def collect(node, parts):
        if node.is_leaf():
            body = " AND ".join(parts) if parts else "<root>"
            rules.append(f"{body} => {_class_label(tree, node, class_names)}")
            return
        internal = node.as_internal()
        name = _attr_name(internal, feature_names)
        for j, child in enumerate(internal.children):
            collect(child, parts + [f"{name} = {internal.attribute.values[j]}"])

    collect(tree.root, [])
    return rules


def export_graphviz(tree: HoeffdingTree, filename: str | None = None, *, feature_names=None,
                    class_names=None, format: str = "png") -> str:
    """
    Export the tree structure in Graphviz format.

    Parameters
    ----------
    tree : HoeffdingTree
        A trained tree.
    filename : str or None, default=None
        Basename of the output file.  If None, the DOT source is returned and
        nothing is written.
    feature_names, class_names : list[str], optional
        Names used in place of the schema's attribute and class labels.
    format : str, default="png"
        Graphviz output format.  ``'dot'`` writes the DOT source without
        calling the external ``dot`` binary.

    Returns
    -------
    str
        Path to the written file, or the DOT source if ``filename`` is None.
    """
    _require_tree(tree)
    try:
        import graphviz
    except ImportError:
        raise RuntimeError("Graphviz is required for export_graphviz but not installed.")
    dot = graphviz.Digraph(format=format)

    def add(node, name: str):
        if node.is_leaf():
            counts = node.class_counts().tolist()
            dot.node(name, f"class={_class_label(tree, node, class_names)}\n{counts}",
                     shape="box", style="filled", color="lightgrey")
            return
        internal = node.as_internal()
        dot.node(name, _attr_name(internal, feature_names),
                 shape="ellipse", style="filled", color="lightblue")
        for j, child in enumerate(internal.children):
            child_id = f"{name}_{j}"
            add(child, child_id)
            dot.edge(name, child_id, label=str(internal.attribute.values[j]))

    add(tree.root, "n0")

    if filename is None:
        return dot.source
    if format.lower() == "dot":
        path = f"{filename}.dot"
        dot.save(path)
        return path
    try:
        dot.render(filename, cleanup=True)
        return f"{filename}.{format}"
    except graphviz.ExecutableNotFound:
        # no dot binary: fall back to the DOT source
        fallback_path = f"{filename}.dot"
        dot.save(fallback_path)
        return fallback_path
