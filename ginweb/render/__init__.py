"""Response renderers that write a content type and a body to a response writer."""