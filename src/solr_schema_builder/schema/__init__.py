"""
Solr schema generation package.

- analyzers: Field type and analyzer chain model
- legacy_json: Schema API JSON shape and encoding
- xml_builder: schema.xml / solrconfig.xml fragments
- dynamic_fields: Dynamic field declarations per field type
- config_set: Assembly of complete config set include files
"""
