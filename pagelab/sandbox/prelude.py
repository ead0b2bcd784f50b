"""
JavaScript installed into every sandbox context before learner code runs.

CONSOLE_PRELUDE defines ``console`` (routed to the host's ConsoleChannel
through ``__pagelab_console``) and the ``__pagelab_run`` entry point.
DOM_PRELUDE defines ``document`` and element wrappers that call the Python
DomBridge through ``__pagelab_dom``.
"""

CONSOLE_PRELUDE = r"""
(function (global) {
  function format(value) {
    if (typeof value === "string") {
      return value;
    }
    if (value instanceof Error) {
      return value.name + ": " + value.message;
    }
    if (value !== null && typeof value === "object") {
      try {
        var text = JSON.stringify(value);
        if (text !== undefined) {
          return text;
        }
      } catch (err) {
        // cyclic values fall back to String()
      }
    }
    return String(value);
  }

  function emitter(level) {
    return function () {
      var parts = [];
      for (var i = 0; i < arguments.length; i++) {
        parts.push(format(arguments[i]));
      }
      __pagelab_console(level, parts.join(" "));
    };
  }

  global.console = {
    log: emitter("log"),
    info: emitter("info"),
    warn: emitter("warn"),
    error: emitter("error"),
    debug: emitter("debug")
  };

  global.__pagelab_run = function (source) {
    try {
      (0, eval)(source);
      return null;
    } catch (err) {
      if (err !== null && typeof err === "object" && "message" in err) {
        return String(err.message);
      }
      return String(err);
    }
  };
})(globalThis);
"""

DOM_PRELUDE = r"""
(function (global) {
  var DOCUMENT = -1;
  var wrappers = {};
  var listeners = {};

  function call(op, handle, first, second) {
    var reply = JSON.parse(__pagelab_dom(
      op,
      handle,
      first === undefined ? null : first,
      second === undefined ? null : second
    ));
    if (reply.error !== undefined) {
      throw new Error(reply.error);
    }
    return reply.ok;
  }

  function text(value) {
    return value === null || value === undefined ? "" : String(value);
  }

  function wrap(handle) {
    if (handle === null || handle === undefined) {
      return null;
    }
    if (!Object.prototype.hasOwnProperty.call(wrappers, handle)) {
      wrappers[handle] = new Element(handle);
    }
    return wrappers[handle];
  }

  function wrapAll(handles) {
    return handles.map(wrap);
  }

  function fire(element, type, event) {
    event = event || {};
    event.type = type;
    event.target = element;
    event.currentTarget = element;
    event.defaultPrevented = false;
    event.preventDefault = function () { this.defaultPrevented = true; };
    event.stopPropagation = function () {};
    var handler = element["on" + type];
    if (typeof handler === "function") {
      handler.call(element, event);
    }
    var registered = (listeners[element.__handle] || {})[type] || [];
    registered.slice().forEach(function (listener) {
      listener.call(element, event);
    });
  }

  function ClassList(handle) {
    this.__handle = handle;
  }
  ClassList.prototype.add = function () {
    for (var i = 0; i < arguments.length; i++) {
      call("class_add", this.__handle, String(arguments[i]));
    }
  };
  ClassList.prototype.remove = function () {
    for (var i = 0; i < arguments.length; i++) {
      call("class_remove", this.__handle, String(arguments[i]));
    }
  };
  ClassList.prototype.toggle = function (name, force) {
    return call("class_toggle", this.__handle, String(name), force === undefined ? null : !!force);
  };
  ClassList.prototype.contains = function (name) {
    return call("class_contains", this.__handle, String(name));
  };

  function makeStyle(handle) {
    return new Proxy({}, {
      get: function (target, prop) {
        if (typeof prop !== "string") {
          return undefined;
        }
        if (prop === "cssText") {
          return call("get", handle, "style");
        }
        if (prop === "setProperty") {
          return function (name, value) { call("style_set", handle, String(name), text(value)); };
        }
        if (prop === "getPropertyValue") {
          return function (name) { return call("style_get", handle, String(name)); };
        }
        if (prop === "removeProperty") {
          return function (name) { call("style_set", handle, String(name), ""); };
        }
        return call("style_get", handle, prop);
      },
      set: function (target, prop, value) {
        if (prop === "cssText") {
          call("set", handle, "style", text(value));
        } else {
          call("style_set", handle, String(prop), text(value));
        }
        return true;
      }
    });
  }

  function Element(handle) {
    this.__handle = handle;
  }

  ["textContent", "innerText", "innerHTML", "id", "className", "value", "src", "href",
   "title", "placeholder", "type", "name", "alt"].forEach(function (name) {
    Object.defineProperty(Element.prototype, name, {
      get: function () { return call("get", this.__handle, name); },
      set: function (value) { call("set", this.__handle, name, text(value)); }
    });
  });

  ["hidden", "disabled", "checked"].forEach(function (name) {
    Object.defineProperty(Element.prototype, name, {
      get: function () { return call("get", this.__handle, name); },
      set: function (value) { call("set", this.__handle, name, !!value); }
    });
  });

  ["tagName", "nodeName", "outerHTML"].forEach(function (name) {
    Object.defineProperty(Element.prototype, name, {
      get: function () { return call("get", this.__handle, name); }
    });
  });

  Object.defineProperty(Element.prototype, "style", {
    get: function () {
      if (!this.__style) {
        this.__style = makeStyle(this.__handle);
      }
      return this.__style;
    },
    set: function (value) { call("set", this.__handle, "style", text(value)); }
  });

  Object.defineProperty(Element.prototype, "classList", {
    get: function () {
      if (!this.__classList) {
        this.__classList = new ClassList(this.__handle);
      }
      return this.__classList;
    }
  });

  Object.defineProperty(Element.prototype, "parentElement", {
    get: function () { return wrap(call("parent", this.__handle)); }
  });
  Object.defineProperty(Element.prototype, "parentNode", {
    get: function () { return wrap(call("parent", this.__handle)); }
  });
  Object.defineProperty(Element.prototype, "children", {
    get: function () { return wrapAll(call("children", this.__handle)); }
  });
  Object.defineProperty(Element.prototype, "firstElementChild", {
    get: function () {
      var children = this.children;
      return children.length ? children[0] : null;
    }
  });
  Object.defineProperty(Element.prototype, "lastElementChild", {
    get: function () {
      var children = this.children;
      return children.length ? children[children.length - 1] : null;
    }
  });

  Element.prototype.querySelector = function (selector) {
    return wrap(call("query", this.__handle, "selector", String(selector)));
  };
  Element.prototype.querySelectorAll = function (selector) {
    return wrapAll(call("query", this.__handle, "selectorAll", String(selector)));
  };
  Element.prototype.getElementsByClassName = function (names) {
    return wrapAll(call("query", this.__handle, "class", String(names)));
  };
  Element.prototype.getElementsByTagName = function (name) {
    return wrapAll(call("query", this.__handle, "tag", String(name)));
  };
  Element.prototype.getAttribute = function (name) {
    return call("attr_get", this.__handle, String(name));
  };
  Element.prototype.setAttribute = function (name, value) {
    call("attr_set", this.__handle, String(name), text(value));
  };
  Element.prototype.removeAttribute = function (name) {
    call("attr_remove", this.__handle, String(name));
  };
  Element.prototype.hasAttribute = function (name) {
    return call("attr_has", this.__handle, String(name));
  };
  Element.prototype.appendChild = function (child) {
    if (!(child instanceof Element)) {
      throw new TypeError("appendChild expects an element");
    }
    call("append", this.__handle, child.__handle);
    return child;
  };
  Element.prototype.append = function () {
    for (var i = 0; i < arguments.length; i++) {
      var item = arguments[i];
      if (item instanceof Element) {
        call("append", this.__handle, item.__handle);
      } else {
        call("append", this.__handle, null, text(item));
      }
    }
  };
  Element.prototype.removeChild = function (child) {
    call("remove", child.__handle);
    return child;
  };
  Element.prototype.remove = function () {
    call("remove", this.__handle);
  };
  Element.prototype.insertAdjacentHTML = function (position, html) {
    call("insert_html", this.__handle, String(position), text(html));
  };
  Element.prototype.addEventListener = function (type, listener) {
    var byType = listeners[this.__handle] = listeners[this.__handle] || {};
    (byType[type] = byType[type] || []).push(listener);
  };
  Element.prototype.removeEventListener = function (type, listener) {
    var byType = listeners[this.__handle] || {};
    byType[type] = (byType[type] || []).filter(function (item) { return item !== listener; });
  };
  Element.prototype.dispatchEvent = function (event) {
    fire(this, event.type, event);
    return true;
  };
  Element.prototype.click = function () {
    fire(this, "click");
  };
  Element.prototype.focus = function () {};
  Element.prototype.blur = function () {};

  function lookup(method, arg) {
    return call("query", DOCUMENT, method, String(arg));
  }

  var document = {
    querySelector: function (selector) { return wrap(lookup("selector", selector)); },
    querySelectorAll: function (selector) { return wrapAll(lookup("selectorAll", selector)); },
    getElementById: function (id) { return wrap(lookup("id", id)); },
    getElementsByClassName: function (names) { return wrapAll(lookup("class", names)); },
    getElementsByTagName: function (name) { return wrapAll(lookup("tag", name)); },
    createElement: function (name) { return wrap(call("create", DOCUMENT, String(name))); },
    addEventListener: function (type, listener) {
      // the preview is already loaded when learner code runs
      if (type === "DOMContentLoaded" || type === "load") {
        listener.call(document, { type: type });
      }
    }
  };
  Object.defineProperty(document, "body", {
    get: function () { return wrap(call("root", DOCUMENT)); }
  });

  global.document = document;
  global.window = global;
  global.Event = function (type) { this.type = type; };
})(globalThis);
"""
