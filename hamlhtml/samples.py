SAMPLE_HAML = """!!!
%html
  %head
    %meta{charset: "utf-8"}
    %title Sample HAML Document
    %link{rel: "stylesheet", href: "styles.css"}
  %body
    %header#main-header
      %nav.navigation
        %ul.nav-list
          %li.nav-item
            %a{href: "/"} Home
          %li.nav-item
            %a{href: "/about"} About
          %li.nav-item
            %a{href: "/contact"} Contact
    %main.container
      %section#hero.hero-section
        %h1.hero-title Welcome to Our Website
        %p.hero-description This is a sample HAML document demonstrating various features.
      %section.features
        %h2 Features
        %ul.feature-list
          %li Clean and readable syntax
          %li Indentation-based structure
          %li CSS-like selectors for classes and IDs
          %li Attribute support with hash syntax
    %footer.site-footer
      %p © 2024 Sample Website. All rights reserved."""
