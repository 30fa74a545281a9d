"""
Page-side JavaScript evaluated by the export pipeline.

Each snippet does one DOM round trip. Decisions (which properties to drop,
which colors to replace) are made in Python; these only read and write.
"""

# Root first, then every descendant in document order.
# Returns one [[property, value], ...] list per node.
COLLECT_COMPUTED_STYLES = '''(root) => {
    const nodes = [root, ...root.querySelectorAll('*')];
    return nodes.map(node => {
        const cs = window.getComputedStyle(node);
        const pairs = [];
        for (let i = 0; i < cs.length; i++) {
            const prop = cs[i];
            pairs.push([prop, cs.getPropertyValue(prop)]);
        }
        return pairs;
    });
}'''

APPLY_INLINE_STYLES = '''(root, cssTexts) => {
    const nodes = [root, ...root.querySelectorAll('*')];
    if (nodes.length !== cssTexts.length) {
        throw new Error(`subtree changed during normalization: ${nodes.length} nodes, ${cssTexts.length} styles`);
    }
    nodes.forEach((node, i) => { node.style.cssText = cssTexts[i]; });
    return nodes.length;
}'''

# Descendants only (root excluded).
COLLECT_COLOR_STYLES = '''(root) => {
    return [...root.querySelectorAll('*')].map(el => {
        const cs = window.getComputedStyle(el);
        return {
            style: {
                'color': cs.getPropertyValue('color') || '',
                'background-color': cs.getPropertyValue('background-color') || '',
                'border-color': cs.getPropertyValue('border-color') || '',
            },
            svg: el instanceof SVGElement,
            fill: el.getAttribute('fill'),
            stroke: el.getAttribute('stroke'),
        };
    });
}'''

APPLY_COLOR_FIXES = '''(root, fixes) => {
    const elements = root.querySelectorAll('*');
    for (const fix of fixes) {
        const el = elements[fix.index];
        if (!el) continue;
        for (const [prop, value] of Object.entries(fix.style)) {
            el.style.setProperty(prop, value);
        }
        for (const [name, value] of Object.entries(fix.attributes)) {
            el.setAttribute(name, value);
        }
    }
    return fixes.length;
}'''

# Clone + override are inserted together or not at all.
OPEN_CLONE_SANDBOX = '''(el, args) => {
    const clone = el.cloneNode(true);
    clone.setAttribute('data-capture-clone', args.token);
    clone.style.position = 'absolute';
    clone.style.top = '-9999px';
    clone.style.left = '0';
    clone.style.opacity = '0';

    const { width, height } = el.getBoundingClientRect();
    clone.style.boxSizing = 'border-box';
    clone.style.width = `${width}px`;
    clone.style.height = `${height}px`;
    document.body.appendChild(clone);

    try {
        const override = document.createElement('style');
        override.setAttribute('data-capture-override', args.token);
        override.textContent = args.css;
        document.head.appendChild(override);
    } catch (e) {
        clone.remove();
        throw e;
    }
    return clone;
}'''

CLOSE_CLONE_SANDBOX = '''(token) => {
    const nodes = document.querySelectorAll(
        `[data-capture-clone="${token}"], style[data-capture-override="${token}"]`
    );
    nodes.forEach(node => node.remove());
    return nodes.length;
}'''

HTML2CANVAS_AVAILABLE = "() => typeof window.html2canvas === 'function'"

# The sandbox clone is parked at opacity 0, and html2canvas skips invisible
# elements; lift it back to 1 in html2canvas's own document copy only.
RUN_HTML2CANVAS = '''(el, options) => {
    const token = el.getAttribute('data-capture-clone');
    const onclone = (doc) => {
        const twin = token && doc.querySelector(`[data-capture-clone="${token}"]`);
        if (twin) twin.style.opacity = '1';
    };
    return window.html2canvas(el, { ...options, onclone })
        .then(canvas => canvas.toDataURL('image/png'));
}'''
